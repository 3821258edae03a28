"""
Interest Rule Module

Effective-dated annual interest rates. A rule applies from its effective
date forward until a later-dated rule supersedes it; at most one rule exists
per effective date.
"""

from decimal import Decimal
from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Tuple

from .amounts import AmountLike, ZERO, to_decimal
from .exceptions import InvalidRate
from .logging_config import get_logger, log_action

MAX_RATE = Decimal('100')


@dataclass(frozen=True)
class InterestRule:
    """Annual rate in percent, effective from a YYYYMMDD date"""
    effective_date: str
    rule_id: str
    rate: Decimal
    
    def to_dict(self) -> Dict[str, str]:
        return {
            "date": self.effective_date,
            "rule_id": self.rule_id,
            "rate": str(self.rate)
        }


class InterestRuleRegistry:
    """
    Ordered set of interest rules, kept sorted ascending by effective date
    """
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        self._rules: List[InterestRule] = []
        self.logger = logger or get_logger("bank_ledger.rules")
    
    def upsert(self, effective_date: str, rule_id: str, rate: AmountLike) -> InterestRule:
        """
        Insert a rule, replacing any rule with the same effective date
        
        The replacement is keyed on the date only: rule ids are free text and
        may repeat across dates.
        
        Args:
            effective_date: YYYYMMDD date the rate starts applying
            rule_id: Rule identifier
            rate: Annual rate in percent, strictly between 0 and 100
            
        Returns:
            The stored rule
            
        Raises:
            InvalidRate: If the rate is outside (0, 100)
        """
        self.logger.info(f"Adding interest rule: {effective_date} {rule_id} {rate}%")
        
        try:
            rate = to_decimal(rate)
        except ValueError:
            self.logger.error(f"Interest rate is not a number: {rate}")
            raise InvalidRate()
        
        if rate <= ZERO or rate >= MAX_RATE:
            self.logger.error(f"Interest rate must be between 0 and 100: {rate}")
            raise InvalidRate()
        
        rule = InterestRule(effective_date=effective_date, rule_id=rule_id, rate=rate)
        
        # Remove any existing rule for the same date
        self._rules = [r for r in self._rules if r.effective_date != effective_date]
        self._rules.append(rule)
        self._rules.sort(key=lambda r: r.effective_date)
        
        log_action(
            self.logger, "info", "Interest rule stored",
            action="upsert_interest_rule", resource=f"interest_rule:{effective_date}",
            extra={"rules": [r.to_dict() for r in self._rules]}
        )
        return rule
    
    def list(self) -> Tuple[InterestRule, ...]:
        """Immutable snapshot of all rules, ascending by effective date"""
        return tuple(self._rules)
    
    def rule_effective_on(self, on_date: str) -> Optional[InterestRule]:
        """The rule with the greatest effective date on or before the given date"""
        applicable = None
        for rule in self._rules:
            if rule.effective_date > on_date:
                break
            applicable = rule
        return applicable
    
    def rate_effective_on(self, on_date: str) -> Decimal:
        """Annual percent rate for a day; zero when no rule applies yet"""
        rule = self.rule_effective_on(on_date)
        return rule.rate if rule else ZERO
    
    def __len__(self) -> int:
        return len(self._rules)
