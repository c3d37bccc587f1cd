"""League rule sets.

Static data only. The PAT-return flag is read by ``gate.ensure_event_allowed``
when a new event is created; aggregation never looks at it.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class RuleSet(str, Enum):
    NEXT_LEVEL = 'NEXT_LEVEL'
    NFL_FLAG = 'NFL_FLAG'
    FARM_LEAGUE = 'FARM_LEAGUE'

    @classmethod
    def parse(cls, tag, default: Optional['RuleSet'] = None) -> Optional['RuleSet']:
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return default

    @property
    def config(self) -> 'RuleConfig':
        return RULESET_CONFIG[self]

    @property
    def label(self) -> str:
        return self.config.label

    @property
    def allow_pat_return(self) -> bool:
        return self.config.allow_pat_return


@dataclass(frozen=True)
class RuleConfig:
    label: str
    allow_pat_return: bool
    pat_return_points: int
    pat1: str
    pat2: str
    notes: Tuple[str, ...] = ()

    def to_dict(self):
        return {
            'label': self.label,
            'allowPatReturn': self.allow_pat_return,
            'patReturnPoints': self.pat_return_points,
            'pat1': self.pat1,
            'pat2': self.pat2,
            'notes': list(self.notes),
        }


RULESET_CONFIG = {
    RuleSet.NEXT_LEVEL: RuleConfig(
        label='Next Level',
        allow_pat_return=False,
        pat_return_points=0,
        pat1='1 point (from 5 yards)',
        pat2='2 points (from 12 yards)',
        notes=(
            'No points for PAT returns.',
            'PAT tries are conversions (1 or 2); do not log a TD (6) during the try.',
        ),
    ),
    RuleSet.NFL_FLAG: RuleConfig(
        label='NFL FLAG',
        allow_pat_return=False,
        pat_return_points=0,
        pat1='1 point (from 5 yards, pass-only)',
        pat2='2 points (from 10 yards)',
        notes=('PAT tries are conversions (1 or 2); do not log a TD (6) during the try.',),
    ),
    RuleSet.FARM_LEAGUE: RuleConfig(
        label='Farm League',
        allow_pat_return=True,
        pat_return_points=2,
        pat1='1 point (from 5 yards, no-run zone)',
        pat2='2 points (from 12 yards)',
        notes=(
            'Defense can return a PAT for 2 points.',
            'TDs on normal offense are 6; PAT tries are conversions (1 or 2).',
        ),
    ),
}

DEFAULT_RULE_SET = RuleSet.NFL_FLAG


def ruleset_catalog():
    return [dict(RULESET_CONFIG[rs].to_dict(), id=rs.value) for rs in RuleSet]
