from dataclasses import dataclass


@dataclass(slots=True)
class DisasterUnit:
    """Adversarial tile with its own movement clock.

    Times are on the session clock (seconds of accumulated tick time). A unit is
    never part of a match; it is destroyed by matches next to it.
    """
    move_interval: float
    next_move_at: float
    destroyed: bool = False

    def ready_for_move(self, now: float) -> bool:
        return now > self.next_move_at

    def time_until_move(self, now: float) -> float:
        return self.next_move_at - now

    def reschedule(self, now: float) -> None:
        self.next_move_at = now + self.move_interval
