"""
Notebench Backend — Note Service
==================================

Notes are owned directly by the authenticated user; everything the routes need
comes from OwnedResourceService with the default owner_id scope.
"""

from notebench.models.note import Note
from notebench.schemas.note import NoteResponse
from notebench.services.ownership import OwnedResourceService


class NoteService(OwnedResourceService[Note]):
    model = Note
    resource = "note"
    response_schema = NoteResponse


note_service = NoteService()
