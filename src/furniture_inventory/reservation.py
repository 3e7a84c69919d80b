"""
Furniture reservation requests.

Requests are validated completely before anything is sent, so an invalid
form never results in a partial submission.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .api_client import ApiClient
from .exceptions import ReservationValidationError

logger = logging.getLogger(__name__)

MSG_NO_FURNITURE = 'Veuillez sélectionner un meuble'
MSG_REQUIRED = 'Veuillez remplir tous les champs obligatoires'
MSG_END_BEFORE_START = 'La date de fin doit être postérieure à la date de début'
MSG_AVAILABLE = 'Créneau disponible'


class ReservationRequest(BaseModel):
    """A reservation form submission."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    furniture_id: Union[int, str, None] = None
    furniture_reference: str = ''
    start_date_time: Optional[datetime] = None
    end_date_time: Optional[datetime] = None
    user_name: str = ''
    user_email: str = ''
    user_phone: str = ''
    department: str = ''
    location: str = ''
    purpose: str = ''

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True)


def _aware(value: datetime) -> datetime:
    # Naive form values are local time
    return value if value.tzinfo is not None else value.astimezone()


def ends_before_start(start: datetime, end: datetime) -> bool:
    """True when end is not strictly after start; mixed naive/aware values are comparable."""
    return _aware(end) <= _aware(start)


def check_availability(start: Optional[datetime], end: Optional[datetime]) -> Tuple[bool, str]:
    """Inline hint shown while the dates are being edited."""
    if start is None or end is None:
        return False, MSG_REQUIRED
    if ends_before_start(start, end):
        return False, MSG_END_BEFORE_START
    return True, MSG_AVAILABLE


def validate_reservation(request: ReservationRequest) -> List[str]:
    """
    Collect every problem with a reservation request.

    Returns an empty list for a valid request.
    """
    messages = []

    if request.furniture_id is None or request.furniture_id == '':
        messages.append(MSG_NO_FURNITURE)

    required = (request.start_date_time, request.end_date_time,
                request.user_name.strip(), request.user_email.strip())
    if not all(required):
        messages.append(MSG_REQUIRED)

    if request.start_date_time and request.end_date_time \
            and ends_before_start(request.start_date_time, request.end_date_time):
        messages.append(MSG_END_BEFORE_START)

    return messages


class ReservationService:
    """Submits validated reservations to the REST API."""

    def __init__(self, api_client: ApiClient):
        self.api_client = api_client

    def submit(self, request: ReservationRequest) -> Dict[str, Any]:
        """
        Validate then send a reservation.

        Raises:
            ReservationValidationError: before any request is made
            ApiError: if the API rejects the reservation or is unreachable
        """
        messages = validate_reservation(request)
        if messages:
            raise ReservationValidationError(messages)

        logger.info("Submitting reservation for furniture %s", request.furniture_id)
        return self.api_client.post('/Reservation', request.to_payload())
