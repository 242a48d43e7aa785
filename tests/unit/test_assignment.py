"""
Agent selection and assignment tests.

Run with: pytest tests/unit/test_assignment.py -v
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from ticket_engine.assignment.application import AssignmentService, TicketAgentDTO
from ticket_engine.assignment.domain import AgentSelector
from ticket_engine.assignment.infrastructure import InMemoryAgentDirectory
from ticket_engine.config import AgentStatus, TicketTier
from ticket_engine.core import AgentCapacityException, ResourceNotFoundException


class TestTicketAgent:
    """Test agent snapshot invariants."""

    def test_capacity_invariant(self, make_agent):
        with pytest.raises(ValueError):
            make_agent("a1", current_tickets=6, max_tickets=5)

    def test_negative_load_rejected(self, make_agent):
        with pytest.raises(ValueError):
            make_agent("a1", current_tickets=-1)

    def test_busy_agent_is_available(self, make_agent):
        assert make_agent("a1", status=AgentStatus.BUSY).is_available

    def test_offline_agent_is_not_available(self, make_agent):
        assert not make_agent("a1", status=AgentStatus.OFFLINE).is_available

    def test_full_agent_is_not_available(self, make_agent):
        agent = make_agent("a1", current_tickets=5, max_tickets=5)
        assert not agent.has_capacity
        assert not agent.is_available

    def test_specialty_matches_by_substring(self, make_agent):
        agent = make_agent("a1", specialties=["api-support"])
        assert agent.matches_any(["api"])
        assert agent.matches_any(["api-support-urgent"])
        assert not agent.matches_any(["billing"])

    def test_blank_values_never_match(self, make_agent):
        """Blank tags and blank specialties are ignored on both sides."""
        assert not make_agent("a1", specialties=["billing"]).matches_any([""])
        assert not make_agent("a2", specialties=[""]).matches_any(["billing"])
        assert make_agent("a3", specialties=["", "billing"]).matches_any(["", "billing"])


class TestAgentSelector:
    """Test candidate filtering and preference order."""

    def test_no_candidates_returns_none(self, make_agent):
        agents = [
            make_agent("offline", status=AgentStatus.OFFLINE),
            make_agent("full", current_tickets=5, max_tickets=5),
            make_agent("other-tier", tier=TicketTier.TIER2),
        ]
        assert AgentSelector().select(agents, TicketTier.TIER1, ["billing"]) is None

    def test_empty_directory_returns_none(self):
        assert AgentSelector().select([], TicketTier.TIER1, []) is None

    def test_specialty_match_beats_load(self, make_agent):
        agents = [
            make_agent("idle", current_tickets=0),
            make_agent("specialist", current_tickets=4, specialties=["billing"]),
        ]
        chosen = AgentSelector().select(agents, TicketTier.TIER1, ["billing"])
        assert chosen.id == "specialist"

    def test_first_specialty_match_wins(self, make_agent):
        """Among specialists the first in snapshot order is chosen."""
        agents = [
            make_agent("busy-specialist", current_tickets=4, specialties=["billing"]),
            make_agent("idle-specialist", current_tickets=0, specialties=["billing-disputes"]),
        ]
        chosen = AgentSelector().select(agents, TicketTier.TIER1, ["billing"])
        assert chosen.id == "busy-specialist"

    def test_least_loaded_without_specialty(self, make_agent):
        agents = [
            make_agent("a", current_tickets=3),
            make_agent("b", current_tickets=1),
            make_agent("c", current_tickets=1),
        ]
        chosen = AgentSelector().select(agents, TicketTier.TIER1, ["other"])
        assert chosen.id == "b"

    def test_empty_tags_ignored(self, make_agent):
        """An empty tag would substring-match every specialty."""
        agents = [
            make_agent("loaded", current_tickets=4, specialties=["billing"]),
            make_agent("idle", current_tickets=0),
        ]
        chosen = AgentSelector().select(agents, TicketTier.TIER1, [""])
        assert chosen.id == "idle"

    def test_blank_specialty_is_not_a_specialist(self, make_agent):
        agents = [
            make_agent("blank", current_tickets=4, specialties=[""]),
            make_agent("idle", current_tickets=0),
        ]
        chosen = AgentSelector().select(agents, TicketTier.TIER1, ["billing"])
        assert chosen.id == "idle"

    def test_never_returns_unavailable_agent(self, make_agent):
        agents = [
            make_agent("offline-specialist", status=AgentStatus.OFFLINE, specialties=["api"]),
            make_agent("full-specialist", current_tickets=5, specialties=["api"]),
            make_agent("ok", current_tickets=2),
        ]
        chosen = AgentSelector().select(agents, TicketTier.TIER1, ["api"])
        assert chosen.id == "ok"


class TestInMemoryAgentDirectory:
    """Test the atomic assign and release primitives."""

    def test_assign_increments(self, make_agent):
        directory = InMemoryAgentDirectory([make_agent("a1", current_tickets=1)])
        agent = directory.assign_ticket("a1", "T1")
        assert agent.current_tickets == 2
        assert directory.get("a1").current_tickets == 2
        assert directory.holds_ticket("a1", "T1")

    def test_assign_same_ticket_twice_takes_one_slot(self, make_agent):
        directory = InMemoryAgentDirectory([make_agent("a1", current_tickets=1)])
        directory.assign_ticket("a1", "T1")
        assert directory.assign_ticket("a1", "T1").current_tickets == 2
        assert directory.held_tickets("a1") == {"T1"}

    def test_assign_held_ticket_to_full_agent_is_noop(self, make_agent):
        directory = InMemoryAgentDirectory([make_agent("a1", current_tickets=4, max_tickets=5)])
        directory.assign_ticket("a1", "T1")
        assert directory.assign_ticket("a1", "T1").current_tickets == 5

    def test_assign_full_agent_raises(self, make_agent):
        directory = InMemoryAgentDirectory([make_agent("a1", current_tickets=5, max_tickets=5)])
        with pytest.raises(AgentCapacityException) as exc_info:
            directory.assign_ticket("a1", "T1")
        assert exc_info.value.details["agent_id"] == "a1"
        assert directory.get("a1").current_tickets == 5
        assert not directory.holds_ticket("a1", "T1")

    def test_assign_offline_agent_raises(self, make_agent):
        directory = InMemoryAgentDirectory([make_agent("a1", status=AgentStatus.OFFLINE)])
        with pytest.raises(AgentCapacityException):
            directory.assign_ticket("a1", "T1")

    def test_unknown_agent_raises(self):
        directory = InMemoryAgentDirectory([])
        with pytest.raises(ResourceNotFoundException):
            directory.assign_ticket("ghost", "T1")
        with pytest.raises(ResourceNotFoundException):
            directory.release_ticket("ghost", "T1")
        assert not directory.holds_ticket("ghost", "T1")

    def test_release_frees_held_ticket_once(self, make_agent):
        directory = InMemoryAgentDirectory([make_agent("a1", current_tickets=2)])
        directory.assign_ticket("a1", "T1")

        assert directory.release_ticket("a1", "T1").current_tickets == 2
        assert directory.release_ticket("a1", "T1").current_tickets == 2
        assert directory.held_tickets("a1") == set()

    def test_release_of_ticket_not_held_is_noop(self, make_agent):
        """Seeded load is not tied to any ticket, so it cannot be released."""
        directory = InMemoryAgentDirectory([make_agent("a1", current_tickets=3)])
        assert directory.release_ticket("a1", "T-unknown").current_tickets == 3

    def test_set_status(self, make_agent):
        directory = InMemoryAgentDirectory([make_agent("a1")])
        directory.set_status("a1", AgentStatus.OFFLINE)
        assert directory.get("a1").status == AgentStatus.OFFLINE

    def test_upsert_adds_agent(self, make_agent):
        directory = InMemoryAgentDirectory([])
        directory.upsert(make_agent("new"))
        assert directory.assign_ticket("new", "T1").current_tickets == 1

    def test_upsert_keeps_held_tickets(self, make_agent):
        directory = InMemoryAgentDirectory([make_agent("a1")])
        directory.assign_ticket("a1", "T1")
        directory.upsert(make_agent("a1", current_tickets=1, max_tickets=10))

        assert directory.holds_ticket("a1", "T1")
        assert directory.release_ticket("a1", "T1").current_tickets == 0

    def test_sample_agents(self, directory):
        assert [a.id for a in directory.list_agents()] == ["agent1", "agent2", "agent3"]


class _StaleSnapshotDirectory(InMemoryAgentDirectory):
    """Hands out an outdated snapshot on the first listing."""

    def __init__(self, agents, stale):
        super().__init__(agents)
        self._stale = list(stale)

    def list_agents(self):
        if self._stale:
            stale, self._stale = self._stale, []
            return stale
        return super().list_agents()


class TestAssignmentService:
    """Test select-then-commit assignment."""

    def test_assigns_and_commits(self, directory):
        service = AssignmentService(directory)
        agent = service.assign(TicketTier.TIER1, ["billing"], "T1")

        assert agent.id == "agent1"
        assert directory.get("agent1").current_tickets == 9
        assert directory.holds_ticket("agent1", "T1")

    def test_reassigning_held_ticket_reuses_agent(self, directory):
        service = AssignmentService(directory)
        service.assign(TicketTier.TIER2, [], "T1")
        agent = service.assign(TicketTier.TIER2, [], "T1")

        assert agent.id == "agent2"
        assert directory.get("agent2").current_tickets == 6

    def test_no_agent_for_tier(self, make_agent):
        service = AssignmentService(InMemoryAgentDirectory([make_agent("a1")]))
        assert service.assign(TicketTier.TIER2, [], "T1") is None

    def test_reselects_after_lost_race(self, make_agent):
        """A candidate filled by someone else is skipped on the next attempt."""
        live = [
            make_agent("a", current_tickets=5, max_tickets=5),
            make_agent("b", current_tickets=2),
        ]
        stale = [make_agent("a", current_tickets=0), make_agent("b", current_tickets=2)]
        directory = _StaleSnapshotDirectory(live, stale)

        agent = AssignmentService(directory).assign(TicketTier.TIER1, [], "T1")

        assert agent.id == "b"
        assert directory.get("a").current_tickets == 5
        assert directory.get("b").current_tickets == 3

    def test_gives_up_after_max_attempts(self, make_agent):
        class _AlwaysFull(InMemoryAgentDirectory):
            def assign_ticket(self, agent_id, ticket_id):
                raise AgentCapacityException(agent_id, 5, 5)

        directory = _AlwaysFull([make_agent("a")])
        service = AssignmentService(directory, max_attempts=2)
        assert service.assign(TicketTier.TIER1, [], "T1") is None

    def test_concurrent_assignment_respects_capacity(self, make_agent):
        directory = InMemoryAgentDirectory([
            make_agent("a", max_tickets=5),
            make_agent("b", max_tickets=3),
        ])
        service = AssignmentService(directory, max_attempts=20)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(
                lambda n: service.assign(TicketTier.TIER1, [], f"T{n}"), range(20)
            ))

        assigned = [r for r in results if r is not None]
        assert len(assigned) == 8
        assert directory.get("a").current_tickets == 5
        assert directory.get("b").current_tickets == 3
        assert len(directory.held_tickets("a") | directory.held_tickets("b")) == 8

    def test_release(self, directory):
        service = AssignmentService(directory)
        service.assign(TicketTier.TIER2, [], "T1")
        service.release("agent2", "T1")
        assert directory.get("agent2").current_tickets == 5

    def test_release_twice_frees_one_slot(self, directory):
        service = AssignmentService(directory)
        service.assign(TicketTier.TIER2, [], "T1")
        service.release("agent2", "T1")
        service.release("agent2", "T1")
        assert directory.get("agent2").current_tickets == 5

    def test_release_unknown_or_missing_is_noop(self, directory):
        service = AssignmentService(directory)
        service.release(None, "T1")
        service.release("ghost", "T1")
        service.release("agent1", "never-assigned")
        assert directory.get("agent1").current_tickets == 8


class TestTicketAgentDTO:
    """Test directory record conversion."""

    def test_round_trip(self, make_agent):
        agent = make_agent("a1", tier=TicketTier.TIER2, specialties=["api"])
        assert TicketAgentDTO.from_domain(agent).to_domain() == agent

    def test_rejects_overloaded_record(self):
        with pytest.raises(ValueError):
            TicketAgentDTO(id="a1", name="A", email="a@x", tier="tier1", current_tickets=3, max_tickets=2)
