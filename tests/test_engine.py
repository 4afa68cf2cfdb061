"""Tests for the KPI salary engine."""

from decimal import Decimal

import pytest

from kpi_payroll.calculators.engine import (
    UNASSIGNED,
    SalaryEngine,
    calculate_company_salaries,
    compute_results_fingerprint,
    rule_role_applies,
)
from kpi_payroll.calculators.types import SalaryLineType, SalaryRole
from tests.factories import (
    make_company,
    make_operation,
    make_performance,
    make_rule,
)


def _result_for(results, role):
    matches = [r for r in results if r.role == role]
    assert len(matches) == 1, f"expected one {role} result, got {len(matches)}"
    return matches[0]


class TestBaseAmount:
    """Test base salary determination."""

    def test_percent_of_contract(self):
        """Base is the role's share of the contract."""
        results = calculate_company_salaries(make_company())
        accountant = _result_for(results, SalaryRole.ACCOUNTANT)

        assert accountant.base_amount == Decimal("200000.00")
        assert accountant.final_amount == Decimal("200000.00")
        assert accountant.kpi_bonus == Decimal("0.00")

    def test_fixed_sum_wins_over_percent(self):
        """A fixed sum takes precedence over a percentage."""
        company = make_company(
            accountant_perc=None,
            bank_client_id="bank-1",
            bank_client_name="Bekzod",
            bank_client_perc=Decimal("10"),
            bank_client_sum=Decimal("150000"),
        )
        bank = _result_for(calculate_company_salaries(company), SalaryRole.BANK_MANAGER)

        assert bank.base_amount == Decimal("150000.00")
        assert bank.details[0] == "Fixed Sum: 150,000"

    def test_role_without_id_percent_or_sum_is_skipped(self):
        """No staff id, percent or sum means no result."""
        company = make_company(accountant_id=None, accountant_name=None, accountant_perc=None)
        assert calculate_company_salaries(company) == []

    def test_assigned_role_with_zero_base_is_skipped(self):
        """Assignment alone does not produce a payroll line."""
        company = make_company(accountant_perc=Decimal("0"))
        assert calculate_company_salaries(company) == []

    def test_unassigned_role_with_percent_is_reported(self):
        """A configured share with nobody assigned is still calculated."""
        company = make_company(accountant_id=None, accountant_name=None)
        accountant = _result_for(calculate_company_salaries(company), SalaryRole.ACCOUNTANT)

        assert accountant.staff_id is None
        assert accountant.staff_name == UNASSIGNED
        assert accountant.base_amount == Decimal("200000.00")

    def test_chief_accountant_requires_configuration(self):
        """The chief accountant has no default share."""
        company = make_company(chief_accountant_id="chief-1", chief_accountant_name="Dilnoza")
        roles = [r.role for r in calculate_company_salaries(company)]
        assert SalaryRole.CHIEF_ACCOUNTANT not in roles

        company = make_company(
            chief_accountant_id="chief-1",
            chief_accountant_name="Dilnoza",
            chief_accountant_perc=Decimal("3"),
        )
        chief = _result_for(calculate_company_salaries(company), SalaryRole.CHIEF_ACCOUNTANT)
        assert chief.base_amount == Decimal("30000.00")

    def test_roles_in_fixed_order(self):
        """Results come out as accountant, bank manager, chief, supervisor."""
        company = make_company(
            bank_client_id="bank-1",
            bank_client_sum=Decimal("100000"),
            chief_accountant_id="chief-1",
            chief_accountant_sum=Decimal("50000"),
            supervisor_id="sup-1",
            supervisor_perc=Decimal("2"),
        )
        roles = [r.role for r in calculate_company_salaries(company)]
        assert roles == [
            SalaryRole.ACCOUNTANT,
            SalaryRole.BANK_MANAGER,
            SalaryRole.CHIEF_ACCOUNTANT,
            SalaryRole.SUPERVISOR,
        ]

    def test_missing_contract_amount_treated_as_zero(self):
        """A company without a contract pays fixed sums and keeps percent roles at zero."""
        company = make_company(
            contract_amount=None,
            bank_client_id="bank-1",
            bank_client_sum=Decimal("90000"),
        )
        results = calculate_company_salaries(company)
        assert [r.role for r in results] == [SalaryRole.ACCOUNTANT, SalaryRole.BANK_MANAGER]

        accountant = _result_for(results, SalaryRole.ACCOUNTANT)
        assert accountant.base_amount == Decimal("0.00")
        assert accountant.final_amount == Decimal("0.00")
        assert _result_for(results, SalaryRole.BANK_MANAGER).final_amount == Decimal("90000.00")

    def test_zero_contract_with_percent_emits_row(self):
        """A configured percent over a zero contract still yields a result."""
        company = make_company(contract_amount=Decimal("0"))
        results = calculate_company_salaries(company)

        assert [r.role for r in results] == [SalaryRole.ACCOUNTANT]
        assert results[0].staff_id == "acc-1"
        assert results[0].base_amount == Decimal("0.00")
        assert results[0].final_amount == Decimal("0.00")


class TestManualKPI:
    """Test KPI from manual performance rows."""

    def test_reward_override(self):
        """1,000,000 contract, 20% share and +5% gives 250,000."""
        perf = make_performance(value=1, reward_percent_override=Decimal("5"))
        results = calculate_company_salaries(make_company(), None, [perf], [make_rule()])
        accountant = _result_for(results, SalaryRole.ACCOUNTANT)

        assert accountant.base_amount == Decimal("200000.00")
        assert accountant.kpi_bonus == Decimal("50000.00")
        assert accountant.final_amount == Decimal("250000.00")

    def test_penalty_override(self):
        """-10% on the same setup gives 100,000."""
        perf = make_performance(value=-1, penalty_percent_override=Decimal("10"))
        results = calculate_company_salaries(make_company(), None, [perf], [make_rule()])
        accountant = _result_for(results, SalaryRole.ACCOUNTANT)

        assert accountant.kpi_bonus == Decimal("-100000.00")
        assert accountant.final_amount == Decimal("100000.00")

    def test_penalty_sign_is_normalized(self):
        """Penalties stored as negative numbers still subtract."""
        perf = make_performance(value=-1, penalty_percent_override=Decimal("-10"))
        results = calculate_company_salaries(make_company(), None, [perf], [make_rule()])
        assert _result_for(results, SalaryRole.ACCOUNTANT).kpi_score == Decimal("-10")

    def test_reward_override_keeps_its_sign(self):
        """A negative reward override is added as stored."""
        perf = make_performance(value=1, reward_percent_override=Decimal("-5"))
        results = calculate_company_salaries(make_company(), None, [perf], [make_rule()])
        accountant = _result_for(results, SalaryRole.ACCOUNTANT)

        assert accountant.kpi_score == Decimal("-5")
        assert accountant.kpi_bonus == Decimal("-50000.00")
        assert accountant.final_amount == Decimal("150000.00")

    def test_falls_back_to_rule_percent(self):
        """Without an override the effective rule percentage is used."""
        perf = make_performance(value=1)
        rule = make_rule(reward="4")
        accountant = _result_for(
            calculate_company_salaries(make_company(), None, [perf], [rule]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.kpi_score == Decimal("4")
        assert accountant.final_amount == Decimal("240000.00")

    def test_zero_value_contributes_nothing(self):
        perf = make_performance(value=0, reward_percent_override=Decimal("5"))
        accountant = _result_for(
            calculate_company_salaries(make_company(), None, [perf], [make_rule()]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.kpi_score == Decimal("0")
        assert len(accountant.lines) == 1

    @pytest.mark.parametrize("status", ["submitted", "rejected"])
    def test_unapproved_rows_excluded(self, status):
        """Only approved rows count toward payroll."""
        perf = make_performance(status=status, reward_percent_override=Decimal("5"))
        accountant = _result_for(
            calculate_company_salaries(make_company(), None, [perf], [make_rule()]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.final_amount == Decimal("200000.00")

    def test_legacy_rows_without_status_count(self):
        """Rows recorded before review existed are treated as approved."""
        perf = make_performance(status=None, reward_percent_override=Decimal("5"))
        accountant = _result_for(
            calculate_company_salaries(make_company(), None, [perf], [make_rule()]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.final_amount == Decimal("250000.00")

    def test_rows_of_other_companies_ignored(self):
        perf = make_performance(company_id="company-2", reward_percent_override=Decimal("5"))
        accountant = _result_for(
            calculate_company_salaries(make_company(), None, [perf], [make_rule()]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.kpi_score == Decimal("0")

    def test_rule_role_filters_rows(self):
        """A supervisor-targeted row does not reach the accountant."""
        company = make_company(supervisor_id="acc-1", supervisor_perc=Decimal("2"))
        perf = make_performance(rule_role="supervisor", reward_percent_override=Decimal("5"))
        results = calculate_company_salaries(company, None, [perf], [make_rule()])

        assert _result_for(results, SalaryRole.ACCOUNTANT).kpi_score == Decimal("0")
        assert _result_for(results, SalaryRole.SUPERVISOR).kpi_score == Decimal("5")

    def test_chief_only_gets_targeted_rows(self):
        """Untargeted rows skip the chief accountant."""
        company = make_company(
            accountant_id="acc-2",
            chief_accountant_id="acc-1",
            chief_accountant_perc=Decimal("3"),
        )
        untargeted = make_performance(rule_role=None, reward_percent_override=Decimal("5"))
        chief = _result_for(
            calculate_company_salaries(company, None, [untargeted], [make_rule()]),
            SalaryRole.CHIEF_ACCOUNTANT,
        )
        assert chief.kpi_score == Decimal("0")

        targeted = make_performance(
            rule_role="chief_accountant", reward_percent_override=Decimal("5")
        )
        chief = _result_for(
            calculate_company_salaries(company, None, [targeted], [make_rule()]),
            SalaryRole.CHIEF_ACCOUNTANT,
        )
        assert chief.kpi_score == Decimal("5")

    def test_final_amount_clamped_at_zero(self):
        """Penalties larger than the base never produce a negative salary."""
        perf = make_performance(value=-1, penalty_percent_override=Decimal("50"))
        accountant = _result_for(
            calculate_company_salaries(make_company(), None, [perf], [make_rule()]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.kpi_bonus == Decimal("-500000.00")
        assert accountant.final_amount == Decimal("0.00")


class TestAutomationKPI:
    """Test KPI from report statuses."""

    def _accountant(self, status, reward="2", penalty="3"):
        rule = make_rule(
            rule_id="auto-1",
            name="acc_didox",
            category="automation",
            reward=reward,
            penalty=penalty,
        )
        operation = make_operation({"didox": status})
        results = calculate_company_salaries(make_company(), operation, [], [rule])
        return _result_for(results, SalaryRole.ACCOUNTANT)

    def test_accepted_status_rewards(self):
        accountant = self._accountant("+")
        assert accountant.kpi_score == Decimal("2")
        assert accountant.kpi_bonus == Decimal("20000.00")
        assert accountant.lines[-1].line_type == SalaryLineType.AUTOMATION_KPI

    def test_not_submitted_status_penalises(self):
        accountant = self._accountant("-")
        assert accountant.kpi_score == Decimal("-3")
        assert accountant.final_amount == Decimal("170000.00")

    @pytest.mark.parametrize("status", ["", None, "ariza", "?", "something else"])
    def test_unknown_status_contributes_nothing(self, status):
        accountant = self._accountant(status)
        assert accountant.kpi_score == Decimal("0")
        assert len(accountant.lines) == 1

    def test_no_operation_record(self):
        rule = make_rule(name="acc_didox", category="automation")
        accountant = _result_for(
            calculate_company_salaries(make_company(), None, [], [rule]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.kpi_score == Decimal("0")

    def test_unmapped_rule_name_ignored(self):
        rule = make_rule(name="acc_unknown_report", category="automation")
        operation = make_operation({"didox": "+"})
        accountant = _result_for(
            calculate_company_salaries(make_company(), operation, [], [rule]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.kpi_score == Decimal("0")

    def test_inactive_rule_ignored(self):
        rule = make_rule(name="acc_didox", category="automation", is_active=False)
        operation = make_operation({"didox": "+"})
        accountant = _result_for(
            calculate_company_salaries(make_company(), operation, [], [rule]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.kpi_score == Decimal("0")

    def test_bank_klient_applies_to_bank_manager_only(self):
        """The bank client report scores the bank manager, not the accountant."""
        company = make_company(bank_client_id="bank-1", bank_client_sum=Decimal("100000"))
        rule = make_rule(
            rule_id="auto-bank",
            name="bank_klient",
            role="bank_client",
            category="automation",
            reward="1",
            penalty="1",
        )
        operation = make_operation({"bank_klient": "kartoteka"})
        results = calculate_company_salaries(company, operation, [], [rule])

        assert _result_for(results, SalaryRole.ACCOUNTANT).kpi_score == Decimal("0")
        bank = _result_for(results, SalaryRole.BANK_MANAGER)
        assert bank.kpi_score == Decimal("-1")
        assert bank.kpi_bonus == Decimal("-10000.00")
        assert bank.final_amount == Decimal("90000.00")

    def test_accountant_rules_skip_bank_manager(self):
        company = make_company(bank_client_id="bank-1", bank_client_sum=Decimal("100000"))
        rule = make_rule(name="acc_didox", category="automation")
        operation = make_operation({"didox": "+"})
        bank = _result_for(
            calculate_company_salaries(company, operation, [], [rule]),
            SalaryRole.BANK_MANAGER,
        )
        assert bank.kpi_score == Decimal("0")

    def test_automation_applies_to_unassigned_role(self):
        """Report statuses score the role even without an assigned employee."""
        company = make_company(accountant_id=None, accountant_name=None)
        rule = make_rule(name="acc_didox", category="automation", reward="2")
        operation = make_operation({"didox": "accepted"})
        accountant = _result_for(
            calculate_company_salaries(company, operation, [], [rule]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.kpi_score == Decimal("2")

    def test_manual_and_automation_combine(self):
        rule = make_rule(rule_id="auto-1", name="acc_didox", category="automation", reward="2")
        perf = make_performance(reward_percent_override=Decimal("5"))
        operation = make_operation({"didox": "+"})
        accountant = _result_for(
            calculate_company_salaries(make_company(), operation, [perf], [make_rule(), rule]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.kpi_score == Decimal("7")
        assert accountant.final_amount == Decimal("270000.00")
        assert accountant.details == [
            "Contract: 1,000,000 * 20%",
            "KPI acc_attendance: +5%",
            "Auto acc_didox (didox): +2%",
        ]


class TestEngineProperties:
    """Test properties that hold for every input."""

    def test_idempotent(self):
        """Repeated calls with identical inputs give identical output."""
        rule = make_rule(rule_id="auto-1", name="acc_didox", category="automation")
        perf = make_performance(reward_percent_override=Decimal("5"))
        operation = make_operation({"didox": "-"})
        args = (make_company(), operation, [perf], [make_rule(), rule])

        first = calculate_company_salaries(*args)
        second = calculate_company_salaries(*args)

        assert first == second
        assert compute_results_fingerprint(first, "1.0.0") == compute_results_fingerprint(
            second, "1.0.0"
        )

    def test_fingerprint_depends_on_engine_version(self):
        results = calculate_company_salaries(make_company())
        assert compute_results_fingerprint(results, "1.0.0") != compute_results_fingerprint(
            results, "2.0.0"
        )

    def test_bonus_scales_with_contract_not_base(self):
        """Two roles with the same KPI percent get the same bonus."""
        company = make_company(
            accountant_perc=Decimal("20"),
            supervisor_id="sup-1",
            supervisor_perc=Decimal("2"),
        )
        perfs = [
            make_performance(rule_role=None, reward_percent_override=Decimal("5")),
            make_performance(
                employee_id="sup-1", rule_role=None, reward_percent_override=Decimal("5")
            ),
        ]
        results = calculate_company_salaries(company, None, perfs, [make_rule()])
        accountant = _result_for(results, SalaryRole.ACCOUNTANT)
        supervisor = _result_for(results, SalaryRole.SUPERVISOR)

        assert accountant.base_amount != supervisor.base_amount
        assert accountant.kpi_bonus == supervisor.kpi_bonus == Decimal("50000.00")

        bigger = make_company(
            contract_amount=Decimal("2000000"),
            supervisor_id="sup-1",
            supervisor_perc=Decimal("2"),
        )
        results = calculate_company_salaries(bigger, None, perfs, [make_rule()])
        assert _result_for(results, SalaryRole.ACCOUNTANT).kpi_bonus == Decimal("100000.00")

    @pytest.mark.parametrize("penalty", ["0", "10", "20", "25", "100", "1000"])
    def test_final_never_negative(self, penalty):
        perf = make_performance(value=-1, penalty_percent_override=Decimal(penalty))
        for result in calculate_company_salaries(make_company(), None, [perf], [make_rule()]):
            assert result.final_amount >= 0

    def test_junk_numeric_values_treated_as_zero(self):
        """Malformed amounts never raise."""
        engine = SalaryEngine(make_company())
        assert engine.calculate_for_role(SalaryRole.SUPERVISOR, None, None, None, None) is None
        assert engine.calculate_for_role(SalaryRole.SUPERVISOR, "sup-1", None, "abc", "n/a") is None

        bank = engine.calculate_for_role(
            SalaryRole.BANK_MANAGER, "bank-1", None, "abc", Decimal("90000")
        )
        assert bank.base_amount == Decimal("90000.00")
        assert bank.final_amount == Decimal("90000.00")

    def test_junk_contract_amount_treated_as_zero(self):
        perf = make_performance(reward_percent_override=Decimal("5"))
        company = make_company(contract_amount="abc", accountant_perc="twenty")
        assert calculate_company_salaries(company, None, [perf], [make_rule()]) == []

        company = make_company(contract_amount="abc")
        accountant = _result_for(
            calculate_company_salaries(company, None, [perf], [make_rule()]),
            SalaryRole.ACCOUNTANT,
        )
        assert accountant.base_amount == Decimal("0.00")
        assert accountant.kpi_score == Decimal("5")
        assert accountant.kpi_bonus == Decimal("0.00")
        assert accountant.final_amount == Decimal("0.00")


class TestRuleRoleApplies:
    """Test manual row targeting."""

    def test_all_and_empty_hit_everyone_but_chief(self):
        for rule_role in (None, "", "all"):
            assert rule_role_applies(rule_role, SalaryRole.ACCOUNTANT) is True
            assert rule_role_applies(rule_role, SalaryRole.SUPERVISOR) is True
            assert rule_role_applies(rule_role, SalaryRole.CHIEF_ACCOUNTANT) is False

    def test_bank_manager_aliases(self):
        assert rule_role_applies("bank_client", SalaryRole.BANK_MANAGER) is True
        assert rule_role_applies("bank_manager", SalaryRole.BANK_MANAGER) is True
        assert rule_role_applies("accountant", SalaryRole.BANK_MANAGER) is False
