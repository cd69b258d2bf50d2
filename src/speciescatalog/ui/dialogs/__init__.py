from speciescatalog.ui.dialogs.edit_species_dialog import EditSpeciesDialog
from speciescatalog.ui.dialogs.species_details_dialog import SpeciesDetailsDialog

__all__ = [
    "EditSpeciesDialog",
    "SpeciesDetailsDialog",
]
