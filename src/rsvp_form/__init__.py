from src.rsvp_form.api import RsvpApiClient
from src.rsvp_form.controller import FormController, LookupHandle
from src.rsvp_form.interpret import LookupResult, normalize_lookup_response
from src.rsvp_form.state import FormState, VisitorState
