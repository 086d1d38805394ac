from pubcal.rules.models import Rules


class SchedulingRulesAdapter:
    """Adapter to map generic Rules to the scheduling RulesPort."""

    def __init__(self, rules: Rules):
        self._rules = rules

    def get_daily_capacity(self) -> int:
        return self._rules.scheduling.daily_capacity

    def get_horizon_days(self) -> int:
        return self._rules.scheduling.horizon_days

    def get_max_past_start_days(self) -> int:
        return self._rules.scheduling.max_past_start_days

    def get_market_codes(self) -> tuple[str, ...]:
        return self._rules.market_codes

    def get_max_transaction_attempts(self) -> int:
        return self._rules.storage.max_transaction_attempts
