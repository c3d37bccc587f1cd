"""Domain errors raised by state transitions and the event creation gate.

Aggregation and document decoding never raise; these only cover explicit
commands that name something missing or invalid.
"""


class StatTrackerError(Exception):
    status_code = 400


class ValidationError(StatTrackerError):
    pass


class GameNotFound(StatTrackerError):
    status_code = 404

    def __init__(self, game_id):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found")


class PlayerNotFound(StatTrackerError):
    status_code = 404

    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__(f"Player {player_id} not found")


class EventNotFound(StatTrackerError):
    status_code = 404

    def __init__(self, event_id):
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class InvalidEventType(StatTrackerError):
    def __init__(self, tag):
        self.tag = tag
        super().__init__(f"Unknown event type {tag!r}")


class InvalidRuleSet(StatTrackerError):
    def __init__(self, tag):
        self.tag = tag
        super().__init__(f"Unknown rule set {tag!r}")


class EventNotAllowed(StatTrackerError):
    """PAT return logged under a rule set that does not score it."""

    def __init__(self, event_type, rule_set):
        self.event_type = event_type
        self.rule_set = rule_set
        super().__init__(f"{event_type} is not allowed under {rule_set}")
