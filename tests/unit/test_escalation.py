"""
Escalation state machine tests.

Run with: pytest tests/unit/test_escalation.py -v
"""

from dataclasses import replace
from datetime import timedelta, timezone

import pytest

from ticket_engine.config import TIER_ORDER, Priority, Satisfaction, TicketStatus, TicketTier
from ticket_engine.rules.domain import EngineRules
from ticket_engine.tickets.domain import (
    EscalationEngine, EscalationReason, Ticket, generate_escalation_id
)
from ticket_engine.triage.domain import KnowledgeBaseEntry


class TestNextTier:
    """Test tier transitions."""

    @pytest.mark.parametrize("before,after", [
        (TicketTier.TIER1, TicketTier.TIER2),
        (TicketTier.TIER2, TicketTier.TIER3),
        (TicketTier.TIER3, TicketTier.ESCALATED),
        (TicketTier.ESCALATED, TicketTier.ESCALATED),
    ])
    def test_next_tier(self, before, after):
        assert EscalationEngine.next_tier(before) == after

    def test_never_moves_backwards(self):
        for tier in TIER_ORDER:
            assert TIER_ORDER.index(EscalationEngine.next_tier(tier)) >= TIER_ORDER.index(tier)


class TestEscalationTriggers:
    """Test automatic escalation reasons."""

    def test_time_limit_only(self, make_ticket, now):
        """A confident tier1 ticket escalates once it is older than two hours."""
        ticket = make_ticket(created_at=now - timedelta(hours=3), ai_confidence=0.9)
        engine = EscalationEngine()

        assert engine.escalation_reasons(ticket, now=now) == [EscalationReason.TIME_LIMIT]
        assert engine.should_escalate(ticket, now=now)

    def test_low_confidence_only(self, make_ticket, now):
        """A fresh tier1 ticket escalates on low confidence alone."""
        ticket = make_ticket(created_at=now - timedelta(minutes=10), ai_confidence=0.3)
        engine = EscalationEngine()

        assert engine.escalation_reasons(ticket, now=now) == [EscalationReason.LOW_CONFIDENCE]
        assert engine.should_escalate(ticket, now=now)

    def test_no_suggestions_counts_as_low_confidence(self, make_ticket, now):
        ticket = make_ticket(ai_confidence=0.0)
        assert EscalationEngine().should_escalate(ticket, now=now)

    def test_confident_fresh_ticket_stays(self, make_ticket, now):
        ticket = make_ticket(created_at=now - timedelta(minutes=30), ai_confidence=0.6)
        assert not EscalationEngine().should_escalate(ticket, now=now)

    def test_age_at_threshold_does_not_escalate(self, make_ticket, now):
        ticket = make_ticket(created_at=now - timedelta(hours=2))
        assert not EscalationEngine().should_escalate(ticket, now=now)

    def test_critical_tag(self, make_ticket, now):
        ticket = make_ticket(tags=["enterprise"])
        assert EscalationEngine().escalation_reasons(ticket, now=now) == [
            EscalationReason.CRITICAL_ISSUE
        ]

    def test_dissatisfaction(self, make_ticket, make_session, now):
        ticket = make_ticket()
        session = make_session(satisfaction=Satisfaction.NEGATIVE)
        assert EscalationEngine().escalation_reasons(ticket, session, now=now) == [
            EscalationReason.DISSATISFACTION
        ]

    def test_all_reasons_collected(self, make_ticket, make_session, now):
        ticket = make_ticket(
            created_at=now - timedelta(hours=5), ai_confidence=0.1, tags=["security"]
        )
        session = make_session(satisfaction=Satisfaction.NEGATIVE)

        reasons = EscalationEngine().escalation_reasons(ticket, session, now=now)

        assert reasons == [
            EscalationReason.TIME_LIMIT,
            EscalationReason.LOW_CONFIDENCE,
            EscalationReason.CRITICAL_ISSUE,
            EscalationReason.DISSATISFACTION,
        ]

    def test_tier1_only_triggers_ignored_above_tier1(self, make_ticket, make_session, now):
        ticket = make_ticket(
            tier=TicketTier.TIER2, ai_confidence=0.1, tags=["security"],
            created_at=now - timedelta(hours=1)
        )
        session = make_session(satisfaction=Satisfaction.NEGATIVE)
        assert not EscalationEngine().should_escalate(ticket, session, now=now)

    @pytest.mark.parametrize("tier,hours", [
        (TicketTier.TIER2, 4),
        (TicketTier.TIER3, 8),
    ])
    def test_time_limit_per_tier(self, make_ticket, now, tier, hours):
        engine = EscalationEngine()
        within = make_ticket(tier=tier, created_at=now - timedelta(hours=hours))
        beyond = make_ticket(tier=tier, created_at=now - timedelta(hours=hours, minutes=1))

        assert not engine.should_escalate(within, now=now)
        assert engine.should_escalate(beyond, now=now)

    def test_terminal_tier_never_times_out(self, make_ticket, now):
        ticket = make_ticket(tier=TicketTier.ESCALATED, created_at=now - timedelta(days=30))
        assert not EscalationEngine().should_escalate(ticket, now=now)

    def test_custom_threshold(self, make_ticket, now):
        rules = EngineRules.model_validate({"escalation": {"low_confidence_threshold": 0.95}})
        ticket = make_ticket(ai_confidence=0.9)
        assert EscalationEngine(rules).escalation_reasons(ticket, now=now) == [
            EscalationReason.LOW_CONFIDENCE
        ]


class TestEscalate:
    """Test the escalation transition."""

    def test_tier3_to_escalated(self, make_ticket, now):
        ticket = make_ticket(
            tier=TicketTier.TIER3, priority=Priority.HIGH, created_at=now - timedelta(hours=1)
        )

        escalated = EscalationEngine().escalate(ticket, "Customer request", "agent3", now=now)

        assert escalated.tier == TicketTier.ESCALATED
        assert escalated.priority == Priority.CRITICAL
        assert escalated.sla_deadline == now + timedelta(hours=2)
        record = escalated.last_escalation
        assert record.from_tier == TicketTier.TIER3
        assert record.to_tier == TicketTier.ESCALATED
        assert record.escalated_by == "agent3"
        assert record.reason == "Customer request"

    def test_input_ticket_untouched(self, make_ticket, now):
        ticket = make_ticket(created_at=now - timedelta(hours=1))
        EscalationEngine().escalate(ticket, "r", "system", now=now)

        assert ticket.tier == TicketTier.TIER1
        assert ticket.escalations == ()

    def test_updates_assignment_and_timestamp(self, make_ticket, now):
        ticket = make_ticket(created_at=now - timedelta(hours=1), assigned_to="agent1")

        escalated = EscalationEngine().escalate(
            ticket, "r", "system", notes="see logs", assigned_to="agent2", now=now
        )

        assert escalated.assigned_to == "agent2"
        assert escalated.updated_at == now
        assert escalated.created_at == ticket.created_at
        assert escalated.last_escalation.notes == "see logs"
        assert escalated.sla_reference_time == now

    def test_chain_is_consistent(self, make_ticket, now):
        """Every record's from/to match the tiers before and after it."""
        engine = EscalationEngine()
        ticket = make_ticket(priority=Priority.LOW, created_at=now - timedelta(hours=1))

        tiers = [ticket.tier]
        for step in range(5):
            ticket = engine.escalate(ticket, "r", "system", now=now + timedelta(minutes=step))
            tiers.append(ticket.tier)

        assert ticket.escalation_count == 5
        for i, record in enumerate(ticket.escalations):
            assert record.from_tier == tiers[i]
            assert record.to_tier == tiers[i + 1]
        assert ticket.priority == Priority.CRITICAL

    def test_terminal_tier_still_records(self, make_ticket, now):
        ticket = make_ticket(
            tier=TicketTier.ESCALATED, priority=Priority.CRITICAL,
            created_at=now - timedelta(hours=1)
        )

        escalated = EscalationEngine().escalate(ticket, "r", "system", now=now)

        assert escalated.tier == TicketTier.ESCALATED
        assert escalated.is_terminal_tier
        assert escalated.escalation_count == 1
        assert escalated.last_escalation.from_tier == TicketTier.ESCALATED

    def test_escalation_ids(self):
        first, second = generate_escalation_id(), generate_escalation_id()
        assert first.startswith("ESC-")
        assert first != second


class TestTicket:
    """Test ticket entity helpers."""

    def test_rejects_updated_before_created(self, make_ticket, now):
        ticket = make_ticket()
        with pytest.raises(ValueError):
            replace(ticket, updated_at=now - timedelta(seconds=1))

    def test_mean_confidence(self):
        entries = [
            KnowledgeBaseEntry(id="a", title="A", content="", confidence=0.6),
            KnowledgeBaseEntry(id="b", title="B", content="", confidence=1.0),
        ]
        assert Ticket.mean_confidence(entries) == pytest.approx(0.8)
        assert Ticket.mean_confidence([]) == 0.0

    def test_mark_first_response_once(self, make_ticket, now):
        ticket = make_ticket()
        ticket.mark_first_response(now + timedelta(minutes=15))
        ticket.mark_first_response(now + timedelta(minutes=45))

        assert ticket.response_time == 15.0
        assert ticket.updated_at == now + timedelta(minutes=15)

    def test_mark_first_response_before_creation(self, make_ticket, now):
        with pytest.raises(ValueError):
            make_ticket().mark_first_response(now - timedelta(minutes=1))

    def test_naive_timestamps_read_as_utc(self, make_ticket, now):
        naive = now.replace(tzinfo=None)
        ticket = make_ticket(created_at=naive)

        assert ticket.created_at == now
        assert ticket.created_at.tzinfo == timezone.utc
        assert ticket.age(naive + timedelta(minutes=5)) == timedelta(minutes=5)
        assert EscalationEngine().should_escalate(ticket, now=naive + timedelta(hours=3))

    def test_aware_ticket_checked_with_naive_now(self, make_ticket, now):
        ticket = make_ticket(created_at=now - timedelta(hours=3))
        assert EscalationEngine().escalation_reasons(ticket, now=now.replace(tzinfo=None)) == [
            EscalationReason.TIME_LIMIT
        ]

    def test_resolve_records_resolution_time(self, make_ticket, now):
        ticket = make_ticket()
        ticket.resolve(now + timedelta(minutes=40))

        assert ticket.status == TicketStatus.RESOLVED
        assert ticket.resolved_at == now + timedelta(minutes=40)
        assert ticket.resolution_time == 40.0
        assert ticket.updated_at == ticket.resolved_at

    def test_resolve_rejects_open_status(self, make_ticket, now):
        with pytest.raises(ValueError):
            make_ticket().resolve(now, status=TicketStatus.OPEN)

    def test_resolve_before_creation(self, make_ticket, now):
        with pytest.raises(ValueError):
            make_ticket().resolve(now - timedelta(minutes=1))
