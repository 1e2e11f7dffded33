"""In-process tax source backed directly by the engines."""

from decimal import Decimal

from homepurchase.engine.cmhc import CMHC_RULES, CMHCRules, compute_cmhc_premium
from homepurchase.engine.land_transfer import (
    ONTARIO_TORONTO_RULES,
    LandTransferRules,
    compute_land_transfer_tax,
)
from homepurchase.models.purchase import DwellingType, PropertyType, Province
from homepurchase.models.results import CMHCResult, LandTransferTaxResult


class LocalTaxService:
    def __init__(
        self,
        ltt_rules: LandTransferRules = ONTARIO_TORONTO_RULES,
        cmhc_rules: CMHCRules = CMHC_RULES,
    ):
        self.ltt_rules = ltt_rules
        self.cmhc_rules = cmhc_rules

    async def get_land_transfer_tax(
        self,
        purchase_price: Decimal,
        is_toronto_property: bool,
        first_time_buyer: bool,
        is_non_resident: bool,
        property_type: PropertyType,
        dwelling_type: DwellingType,
    ) -> LandTransferTaxResult:
        return compute_land_transfer_tax(
            purchase_price,
            is_toronto_property=is_toronto_property,
            first_time_buyer=first_time_buyer,
            is_non_resident=is_non_resident,
            property_type=property_type,
            dwelling_type=dwelling_type,
            rules=self.ltt_rules,
        )

    async def get_cmhc_pst(
        self,
        purchase_price: Decimal,
        down_payment: Decimal,
        province: Province,
    ) -> CMHCResult:
        return compute_cmhc_premium(purchase_price, down_payment, province, rules=self.cmhc_rules)
