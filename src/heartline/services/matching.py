"""Swipe and match engine.

Turns unilateral likes into mutual matches and maintains each profile's
liked / passed / matched identity sets. Every entry point goes through
:meth:`MatchEngine.ensure_profile`, so profiles are materialized lazily on the
first matching action of an account.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from heartline.core.errors import ValidationFailedError
from heartline.core.settings import settings
from heartline.db.time import as_utc, utcnow
from heartline.models import Account, Match, Message, Profile, ProfileEdge
from heartline.models.match import canonical_pair
from heartline.models.profile import EDGE_LIKED, EDGE_MATCHED, EDGE_PASSED

from .conversations import conversation_id
from .events import RealtimeEvent, unmatched_notice

logger = logging.getLogger(__name__)


@dataclass
class LikeOutcome:
    """Result of a like: whether it completed a mutual match."""

    matched: bool
    match: Match | None = None
    counterpart: Account | None = None


@dataclass
class Candidate:
    """A profile the actor has not swiped on yet."""

    profile: Profile
    account: Account


@dataclass
class MatchSummary:
    """An active match as seen by one of its participants."""

    match: Match
    counterpart: Account


@dataclass
class UnmatchOutcome:
    """What an unmatch changed, plus the notifications it implies."""

    was_matched: bool
    messages_deleted: int = 0
    events: list[RealtimeEvent] = field(default_factory=list)


def _require_ids(**identifiers: str | None) -> None:
    missing = [name for name, value in identifiers.items() if not value]
    if missing:
        raise ValidationFailedError(
            f"Missing required identifier: {', '.join(missing)}",
            code="MISSING_FIELDS",
        )


class MatchEngine:
    """Records swipes and materializes mutual matches."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # --- profiles -------------------------------------------------------------------
    def ensure_profile(self, account_id: str) -> Profile:
        """Return the account's profile, creating it if absent.

        The new profile takes the account's age, falling back to the configured
        default age when the account is unknown.
        """
        _require_ids(account_id=account_id)
        profile = self.db.get(Profile, account_id)
        if profile is not None:
            return profile

        account = self.db.get(Account, account_id)
        age = account.age if account is not None and account.age else settings.default_profile_age
        profile = Profile(owner_id=account_id, age=age, interests=[])
        self.db.add(profile)
        self.db.flush()
        logger.debug("Created profile for %s", account_id)
        return profile

    def _has_edge(self, owner_id: str, kind: str, target_id: str) -> bool:
        return self.db.get(ProfileEdge, (owner_id, kind, target_id)) is not None

    def _add_edge(self, profile: Profile, kind: str, target_id: str) -> bool:
        """Insert ``target_id`` into one of the profile's sets if not present."""
        if self._has_edge(profile.owner_id, kind, target_id):
            return False
        profile.edges.append(ProfileEdge(owner_id=profile.owner_id, kind=kind, target_id=target_id))
        self.db.flush()
        return True

    def _remove_edge(self, owner_id: str, kind: str, target_id: str) -> int:
        result = self.db.execute(
            delete(ProfileEdge)
            .where(
                ProfileEdge.owner_id == owner_id,
                ProfileEdge.kind == kind,
                ProfileEdge.target_id == target_id,
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    # --- swipes ---------------------------------------------------------------------
    def record_like(self, actor_id: str, target_id: str) -> LikeOutcome:
        """Like ``target_id`` and report whether the like completed a match.

        No real-time notification is sent from here; callers inspect
        ``LikeOutcome.matched`` and fan out as they see fit.
        """
        _require_ids(actor_id=actor_id, profile_id=target_id)
        if actor_id == target_id:
            raise ValidationFailedError("You cannot like your own profile", code="SELF_SWIPE")

        try:
            actor_profile = self.ensure_profile(actor_id)
            self._add_edge(actor_profile, EDGE_LIKED, target_id)

            target_profile = self.db.get(Profile, target_id)
            if target_profile is None or not self._has_edge(target_id, EDGE_LIKED, actor_id):
                self.db.commit()
                return LikeOutcome(matched=False)

            self._add_edge(actor_profile, EDGE_MATCHED, target_id)
            self._add_edge(target_profile, EDGE_MATCHED, actor_id)
            match = self._get_or_create_match(actor_id, target_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        counterpart = self.db.get(Account, target_id)
        return LikeOutcome(matched=True, match=match, counterpart=counterpart)

    def record_pass(self, actor_id: str, target_id: str) -> None:
        """Pass on ``target_id``; no match logic is involved."""
        _require_ids(actor_id=actor_id, profile_id=target_id)
        if actor_id == target_id:
            raise ValidationFailedError("You cannot pass on your own profile", code="SELF_SWIPE")

        try:
            actor_profile = self.ensure_profile(actor_id)
            self._add_edge(actor_profile, EDGE_PASSED, target_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # --- matches --------------------------------------------------------------------
    def find_match(self, user_a: str, user_b: str) -> Match | None:
        """Return the canonical match record for the pair, active or not."""
        user1_id, user2_id = canonical_pair(user_a, user_b)
        return self.db.scalars(
            select(Match).where(Match.user1_id == user1_id, Match.user2_id == user2_id)
        ).first()

    def _get_or_create_match(self, user_a: str, user_b: str) -> Match:
        """Create the canonical match only if no record exists for the pair.

        The unique constraint on the pair decides races: if a concurrent
        request inserted the row first, the savepoint is rolled back and the
        winner's row is returned. An inactive record is reactivated.
        """
        match = self.find_match(user_a, user_b)
        if match is None:
            user1_id, user2_id = canonical_pair(user_a, user_b)
            try:
                with self.db.begin_nested():
                    match = Match(user1_id=user1_id, user2_id=user2_id, active=True)
                    self.db.add(match)
            except IntegrityError:
                logger.info("Match %s/%s created concurrently, reusing it", user1_id, user2_id)
                match = self.find_match(user_a, user_b)
                if match is None:
                    raise
            else:
                logger.info("Match created between %s and %s", user1_id, user2_id)
                return match

        if not match.active:
            match.active = True
            match.matched_at = utcnow()
            self.db.flush()
            logger.info("Match %s reactivated", match.id)
        return match

    def list_candidates(self, actor_id: str, limit: int | None = None) -> list[Candidate]:
        """Return up to ``limit`` profiles the actor has not seen.

        The exclusion set (self, liked, passed, matched) is applied in the
        query itself, so no previously swiped identity can reappear. Order
        among candidates is unspecified.
        """
        if limit is None:
            limit = settings.candidate_page_default
        if limit < 1:
            raise ValidationFailedError("Limit must be a positive integer")
        limit = min(limit, settings.candidate_page_max)

        try:
            self.ensure_profile(actor_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        seen = select(ProfileEdge.target_id).where(ProfileEdge.owner_id == actor_id)
        rows = self.db.execute(
            select(Profile, Account)
            .join(Account, Account.id == Profile.owner_id)
            .where(Profile.owner_id != actor_id, Profile.owner_id.not_in(seen))
            .limit(limit)
        ).all()
        return [Candidate(profile=profile, account=account) for profile, account in rows]

    def active_matches(self, user_id: str) -> Sequence[Match]:
        """Return every active match the user participates in."""
        return self.db.scalars(
            select(Match).where(
                or_(Match.user1_id == user_id, Match.user2_id == user_id),
                Match.active.is_(True),
            )
        ).all()

    def list_matches(self, actor_id: str) -> list[MatchSummary]:
        """Return the counterpart of every active match, newest first."""
        _require_ids(actor_id=actor_id)
        summaries: list[MatchSummary] = []
        for match in self.active_matches(actor_id):
            counterpart = self.db.get(Account, match.counterpart_of(actor_id))
            if counterpart is not None:
                summaries.append(MatchSummary(match=match, counterpart=counterpart))
        summaries.sort(key=lambda summary: as_utc(summary.match.matched_at), reverse=True)
        return summaries

    def unmatch(self, actor_id: str, counterpart_id: str) -> UnmatchOutcome:
        """Dissolve a match and everything hanging off it.

        Both match edges are removed, the canonical record is deactivated (never
        deleted) and the conversation's messages are deleted. All of it is
        committed as one transaction, so a failure leaves nothing half-applied.
        """
        _require_ids(actor_id=actor_id, user_id=counterpart_id)
        if actor_id == counterpart_id:
            raise ValidationFailedError("You cannot unmatch yourself", code="SELF_SWIPE")

        try:
            removed = self._remove_edge(actor_id, EDGE_MATCHED, counterpart_id)
            removed += self._remove_edge(counterpart_id, EDGE_MATCHED, actor_id)

            match = self.find_match(actor_id, counterpart_id)
            was_active = match is not None and match.active
            if match is not None:
                match.active = False

            deleted = self.db.execute(
                delete(Message)
                .where(Message.conversation_id == conversation_id(actor_id, counterpart_id))
                .execution_options(synchronize_session="fetch")
            ).rowcount or 0
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        was_matched = was_active or removed > 0
        logger.info(
            "Unmatched %s and %s (%d messages deleted)", actor_id, counterpart_id, deleted
        )
        events = [unmatched_notice(actor_id, counterpart_id)] if was_matched else []
        return UnmatchOutcome(was_matched=was_matched, messages_deleted=deleted, events=events)
