"""Mapping of automation KPI rule names to operation record fields."""

from __future__ import annotations

from enum import Enum


class OperationField(str, Enum):
    """Report status columns of an operation record."""

    BANK_KLIENT = "bank_klient"
    DIDOX = "didox"
    XATLAR = "xatlar"
    AVTOKAMERAL = "avtokameral"
    MY_MEHNAT = "my_mehnat"
    ONE_C = "one_c"
    PUL_OQIMLARI = "pul_oqimlari"
    CHIQADIGAN_SOLIQLAR = "chiqadigan_soliqlar"
    HISOBLANGAN_OYLIK = "hisoblangan_oylik"
    DEBITOR_KREDITOR = "debitor_kreditor"
    FOYDA_VA_ZARAR = "foyda_va_zarar"
    TOVAR_OSTATKA = "tovar_ostatka"
    NDS_BEKOR_QILISH = "nds_bekor_qilish"
    AYLANMA_QQS = "aylanma_qqs"
    DAROMAD_SOLIQ = "daromad_soliq"
    INPS = "inps"
    FOYDA_SOLIQ = "foyda_soliq"
    MOLIYAVIY_NATIJA = "moliyaviy_natija"
    BUXGALTERIYA_BALANSI = "buxgalteriya_balansi"
    STATISTIKA = "statistika"
    BONAK = "bonak"
    YER_SOLIGI = "yer_soligi"
    MOL_MULK_SOLIGI = "mol_mulk_soligi"
    SUV_SOLIGI = "suv_soligi"


class AutomationRule(str, Enum):
    """Known automation rule names."""

    ACC_1C_BASE = "acc_1c_base"
    ACC_DIDOX = "acc_didox"
    ACC_LETTERS = "acc_letters"
    ACC_MY_MEHNAT = "acc_my_mehnat"
    ACC_AUTO_CAMERAL = "acc_auto_cameral"
    ACC_CASHFLOW = "acc_cashflow"
    ACC_TAX_INFO = "acc_tax_info"
    ACC_PAYROLL = "acc_payroll"
    ACC_DEBT = "acc_debt"
    ACC_PNL = "acc_pnl"
    BANK_KLIENT = "bank_klient"


AUTOMATION_FIELDS: dict[AutomationRule, OperationField] = {
    AutomationRule.ACC_1C_BASE: OperationField.ONE_C,
    AutomationRule.ACC_DIDOX: OperationField.DIDOX,
    AutomationRule.ACC_LETTERS: OperationField.XATLAR,
    AutomationRule.ACC_MY_MEHNAT: OperationField.MY_MEHNAT,
    AutomationRule.ACC_AUTO_CAMERAL: OperationField.AVTOKAMERAL,
    AutomationRule.ACC_CASHFLOW: OperationField.PUL_OQIMLARI,
    AutomationRule.ACC_TAX_INFO: OperationField.CHIQADIGAN_SOLIQLAR,
    AutomationRule.ACC_PAYROLL: OperationField.HISOBLANGAN_OYLIK,
    AutomationRule.ACC_DEBT: OperationField.DEBITOR_KREDITOR,
    AutomationRule.ACC_PNL: OperationField.FOYDA_VA_ZARAR,
    AutomationRule.BANK_KLIENT: OperationField.BANK_KLIENT,
}

_BY_NAME = {rule.value: field for rule, field in AUTOMATION_FIELDS.items()}


def resolve_operation_field(rule_name: str | None) -> OperationField | None:
    """Return the operation field an automation rule reads, if known."""
    if not rule_name:
        return None
    return _BY_NAME.get(rule_name.strip())
