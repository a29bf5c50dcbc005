"""
Datapool Imports
================

- **datapool**: the Datapool structures filled by imports
- **ramview**: the RAMView .def project importer
"""

from kefex_legacy.imports.datapool import (
    Datapool,
    DatapoolContent,
    DatapoolDataSet,
    DatapoolElement,
    DatapoolKind,
    DatapoolList,
    ElementAccess,
    ElementType,
    cast_value,
)
from kefex_legacy.imports.ramview import (
    NVM_ADDRESS_NOTE,
    RamViewImporter,
    adapt_name,
    import_ramview_project,
)

__all__ = [
    "Datapool",
    "DatapoolContent",
    "DatapoolDataSet",
    "DatapoolElement",
    "DatapoolKind",
    "DatapoolList",
    "ElementAccess",
    "ElementType",
    "cast_value",
    "NVM_ADDRESS_NOTE",
    "RamViewImporter",
    "adapt_name",
    "import_ramview_project",
]
