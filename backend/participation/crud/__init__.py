from .crud_participant import participant
