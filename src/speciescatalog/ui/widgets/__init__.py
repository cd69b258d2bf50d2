from speciescatalog.ui.widgets.remote_image import RemoteImageLabel
from speciescatalog.ui.widgets.species_card import SpeciesCard
from speciescatalog.ui.widgets.toast import ToastFrame, ToastNotifier

__all__ = [
    "RemoteImageLabel",
    "SpeciesCard",
    "ToastFrame",
    "ToastNotifier",
]
