from src.shared.models.enums import AccommodationStatus


class AccommodationStateMachine:
    # A pending accommodation whose registration fails is deleted, not transitioned
    ALLOWED_TRANSITIONS = {
        AccommodationStatus.PENDING: [AccommodationStatus.CREATED],
        AccommodationStatus.CREATED: [],
    }

    @staticmethod
    def can_transition(current_status: str, new_status: str) -> bool:
        try:
            curr = AccommodationStatus(current_status)
            new = AccommodationStatus(new_status)
            return new in AccommodationStateMachine.ALLOWED_TRANSITIONS.get(curr, [])
        except ValueError:
            return False
