RSVP_URL = "/api/rsvp"
