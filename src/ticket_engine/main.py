"""
Ticket Engine - Bootstrap
=========================

Wires the engine together:

STARTUP:
1. Setup structured logging
2. Load and watch the rules file
3. Build knowledge base store, agent directory and ticket repository
4. Build orchestrator and escalation sweep
5. Start the escalation scheduler

SHUTDOWN:
1. Stop the escalation scheduler
2. Stop watching the rules file
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from ticket_engine.assignment.application import IAgentDirectory
from ticket_engine.assignment.infrastructure import InMemoryAgentDirectory
from ticket_engine.config import Settings, get_settings
from ticket_engine.rules.infrastructure import RulesConfigManager
from ticket_engine.shared.infrastructure.logging import get_logger, setup_logging
from ticket_engine.tickets.application import (
    EscalationSweepService, ITicketRepository, TicketOrchestrator
)
from ticket_engine.tickets.infrastructure import EscalationScheduler, InMemoryTicketRepository
from ticket_engine.triage.application import IChatSessionRepository, IKnowledgeBaseStore
from ticket_engine.triage.infrastructure import (
    InMemoryChatSessionRepository, InMemoryKnowledgeBaseStore
)

logger = get_logger(__name__)


@dataclass
class Engine:
    """Wired engine components."""
    settings: Settings
    rules: RulesConfigManager
    orchestrator: TicketOrchestrator
    sweep: EscalationSweepService
    scheduler: EscalationScheduler
    tickets: ITicketRepository

    async def start(self) -> None:
        if self.settings.watch_rules_config:
            self.rules.start_watching()
        await self.scheduler.start()
        logger.info("Ticket engine started", extra={"version": self.settings.app_version})

    async def stop(self) -> None:
        logger.info("Shutting down ticket engine")
        await self.scheduler.stop()
        self.rules.stop_watching()


def build_engine(
    settings: Optional[Settings] = None,
    knowledge_base: Optional[IKnowledgeBaseStore] = None,
    agent_directory: Optional[IAgentDirectory] = None,
    ticket_repository: Optional[ITicketRepository] = None,
    chat_sessions: Optional[IChatSessionRepository] = None
) -> Engine:
    """
    Build the engine from settings and collaborators.

    Collaborators default to in-memory implementations seeded with the
    sample knowledge base and agents.
    """
    settings = settings or get_settings()

    rules = RulesConfigManager()
    rules.load(settings.rules_config_path)

    tickets = ticket_repository or InMemoryTicketRepository()
    orchestrator = TicketOrchestrator(
        knowledge_base=knowledge_base or InMemoryKnowledgeBaseStore(),
        agent_directory=agent_directory or InMemoryAgentDirectory(),
        rules_provider=rules,
        assignment_max_attempts=settings.assignment_max_attempts
    )
    sweep = EscalationSweepService(
        ticket_repository=tickets,
        orchestrator=orchestrator,
        chat_sessions=chat_sessions or InMemoryChatSessionRepository(),
        system_actor=settings.system_actor
    )
    scheduler = EscalationScheduler(sweep, interval_seconds=settings.escalation_sweep_interval)

    return Engine(
        settings=settings,
        rules=rules,
        orchestrator=orchestrator,
        sweep=sweep,
        scheduler=scheduler,
        tickets=tickets
    )


async def run(settings: Optional[Settings] = None) -> None:
    """Run the engine until cancelled."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.environment, settings.app_name)

    engine = build_engine(settings)
    await engine.start()
    try:
        await asyncio.Event().wait()
    finally:
        await engine.stop()


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
