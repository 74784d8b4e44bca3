"""Bucket staging — optional review step between collecting and consolidation."""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from logistics.bucket.bucket import Bucket
from logistics.domain import logistics


@logistics.command(part_of="Bucket")
class StartProcessing:
    """Take a collecting bucket off the collecting slot for operator review."""

    bucket_id = Identifier(required=True)
    notes = Text()


@logistics.command_handler(part_of=Bucket)
class StagingHandler:
    @handle(StartProcessing)
    def start_processing(self, command):
        repo = current_domain.repository_for(Bucket)
        bucket = repo.get(command.bucket_id)
        bucket.start_processing(notes=command.notes)
        repo.add(bucket)
