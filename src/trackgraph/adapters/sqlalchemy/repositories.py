"""Entity store backed by a SQLAlchemy session."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from trackgraph.adapters.sqlalchemy.mappings import (
    artist_table,
    group_table,
    release_table,
    track_table,
)
from trackgraph.domain.ingest_pipeline.errors import ConflictError, InfrastructureError
from trackgraph.domain.model import (
    ASSOCIATION_CLASSES,
    Artist,
    ArtistRelease,
    AssociationKind,
    Group,
    Release,
    ReleaseTrack,
    Track,
    TrackArtist,
    build_association,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator, Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session

    from trackgraph.domain.model import AudioUploadStatus


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise driver errors as domain infrastructure errors."""

    try:
        yield
    except IntegrityError as exc:
        raise ConflictError(f"{action}: unique constraint violated ({exc.orig})") from exc
    except SQLAlchemyError as exc:
        raise InfrastructureError(f"{action}: {exc}") from exc


class SqlAlchemyEntityStore:
    """``EntityStore`` over one session.

    With ``autocommit`` every write is committed before returning (the ambient
    store). Without it writes are only flushed and the owning transaction
    decides their fate.
    """

    def __init__(self, session: Session, *, autocommit: bool = False) -> None:
        self.session = session
        self.autocommit = autocommit

    # artists ----------------------------------------------------------------

    def find_artist_by_name(
        self, display_name: str, *, first_name: str, surname: str
    ) -> Artist | None:
        stmt = (
            select(Artist)
            .where(
                or_(
                    func.lower(artist_table.c.display_name) == display_name.lower(),
                    and_(
                        func.lower(artist_table.c.first_name) == first_name.lower(),
                        func.lower(artist_table.c.surname) == surname.lower(),
                    ),
                )
            )
            .limit(1)
        )
        with translate_errors("Artist lookup failed"):
            return self.session.execute(stmt).scalars().first()

    def artist_slug_exists(self, slug: str) -> bool:
        stmt = select(artist_table.c.id).where(artist_table.c.slug == slug).limit(1)
        with translate_errors("Artist slug lookup failed"):
            return self.session.execute(stmt).first() is not None

    def create_artist(
        self,
        artist: Artist,
        *,
        release_id: UUID | None = None,
        track_id: UUID | None = None,
    ) -> Artist:
        rows: list[object] = [artist]
        if release_id is not None:
            rows.append(ArtistRelease(artist_id=artist.id, release_id=release_id))
        if track_id is not None:
            rows.append(TrackArtist(track_id=track_id, artist_id=artist.id))
        self._write("Artist creation failed", rows)
        return artist

    # groups -----------------------------------------------------------------

    def find_group_by_name(self, name: str) -> Group | None:
        lowered = name.lower()
        stmt = (
            select(Group)
            .where(
                or_(
                    func.lower(group_table.c.name) == lowered,
                    func.lower(group_table.c.display_name) == lowered,
                )
            )
            .limit(1)
        )
        with translate_errors("Group lookup failed"):
            return self.session.execute(stmt).scalars().first()

    def create_group(self, group: Group, *, artist_id: UUID | None = None) -> Group:
        rows: list[object] = [group]
        if artist_id is not None:
            rows.append(build_association(AssociationKind.ARTIST_GROUP, artist_id, group.id))
        self._write("Group creation failed", rows)
        return group

    # releases ---------------------------------------------------------------

    def find_release_by_title(self, title: str) -> Release | None:
        stmt = (
            select(Release).where(func.lower(release_table.c.title) == title.lower()).limit(1)
        )
        with translate_errors("Release lookup failed"):
            return self.session.execute(stmt).scalars().first()

    def create_release(self, release: Release) -> Release:
        self._write("Release creation failed", [release])
        return release

    # associations -----------------------------------------------------------

    def find_association(self, kind: AssociationKind, left_id: UUID, right_id: UUID) -> bool:
        association_cls = ASSOCIATION_CLASSES[kind]
        with translate_errors(f"{kind} lookup failed"):
            return self.session.get(association_cls, (left_id, right_id)) is not None

    def create_association(self, kind: AssociationKind, left_id: UUID, right_id: UUID) -> None:
        self._write(f"{kind} creation failed", [build_association(kind, left_id, right_id)])

    # tracks -----------------------------------------------------------------

    def create_track(
        self,
        track: Track,
        *,
        release_id: UUID | None = None,
        artist_id: UUID | None = None,
    ) -> Track:
        rows: list[object] = [track]
        if release_id is not None:
            rows.append(
                ReleaseTrack(
                    release_id=release_id,
                    track_id=track.id,
                    position=track.position,
                    cover_art=track.cover_art,
                )
            )
        if artist_id is not None:
            rows.append(TrackArtist(track_id=track.id, artist_id=artist_id))
        self._write("Track creation failed", rows)
        return track

    def get_track(self, track_id: UUID) -> Track | None:
        with translate_errors("Track lookup failed"):
            return self.session.get(Track, track_id)

    def find_tracks_by_content_hash(self, hashes: Collection[str]) -> Sequence[Track]:
        if not hashes:
            return []
        stmt = (
            select(Track)
            .where(track_table.c.content_hash.in_(list(hashes)))
            .order_by(track_table.c.title)
        )
        with translate_errors("Track hash lookup failed"):
            return list(self.session.execute(stmt).scalars())

    def update_track_audio(
        self,
        track_id: UUID,
        *,
        status: AudioUploadStatus,
        audio_location: str | None = None,
    ) -> None:
        track = self.get_track(track_id)
        if track is None:
            raise InfrastructureError(f"Track {track_id} does not exist")
        track.upload_status = status
        if audio_location is not None:
            track.audio_location = audio_location
        self._write("Track audio update failed", [])

    # helpers ----------------------------------------------------------------

    def _write(self, action: str, rows: Sequence[object]) -> None:
        """Flush ``rows`` one at a time so parents land before their association rows."""

        try:
            with translate_errors(action):
                for row in rows:
                    self.session.add(row)
                    self.session.flush()
                if not rows:
                    self.session.flush()
                if self.autocommit:
                    self.session.commit()
        except InfrastructureError:
            if self.autocommit:
                self.session.rollback()
            raise
