from django.db import models

class BloodUnitStatus(models.TextChoices):
    AVAILABLE   = "AVAILABLE", "Available"
    RESERVED    = "RESERVED", "Reserved"
    USED        = "USED", "Used"
    EXPIRED     = "EXPIRED", "Expired"
    DISCARDED   = "DISCARDED", "Discarded"
    QUARANTINED = "QUARANTINED", "Quarantined"

class ComponentType(models.TextChoices):
    WHOLE_BLOOD     = "WHOLE_BLOOD", "Whole Blood"
    RED_CELLS       = "RED_CELLS", "Red Blood Cells"
    PLASMA          = "PLASMA", "Plasma"
    PLATELETS       = "PLATELETS", "Platelets"
    CRYOPRECIPITATE = "CRYOPRECIPITATE", "Cryoprecipitate"

    @classmethod
    def code_for(cls, value) -> str:
        return COMPONENT_CODES[cls(value)]

# 3-letter codes embedded in unit numbers
COMPONENT_CODES = {
    ComponentType.WHOLE_BLOOD: "WBL",
    ComponentType.RED_CELLS: "RBC",
    ComponentType.PLASMA: "PLS",
    ComponentType.PLATELETS: "PLT",
    ComponentType.CRYOPRECIPITATE: "CRY",
}
