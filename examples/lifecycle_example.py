#!/usr/bin/env python3
"""
Lifecycle Example - Record Lifecycle

Demonstrates soft delete and active/inactive flags on a small help desk
schema:
- Default reads that skip deleted and inactive records
- Deactivating and reactivating a record
- Reaching flagged records on purpose
- Counting records by flag state
"""

from sqlalchemy import Column, ForeignKey, Integer, String, create_engine, select
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from record_lifecycle import (
    LifecycleMixin,
    LifecycleService,
    include_flagged,
    install_lifecycle_filter,
)

Base = declarative_base()


class Agent(Base, LifecycleMixin):
    """Support agent who can be disabled without losing history."""

    __tablename__ = "agents"

    id = Column(Integer, primary_key=True)
    email = Column(String, nullable=False)
    tickets = relationship("Ticket", back_populates="agent")


class Ticket(Base, LifecycleMixin):
    """Support ticket."""

    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True)
    agent_id = Column(Integer, ForeignKey("agents.id"))
    subject = Column(String, nullable=False)
    agent = relationship("Agent", back_populates="tickets")


def demonstrate_lifecycle() -> None:
    """Show lifecycle flags and filtered reads."""
    print("Lifecycle Example\n")

    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    install_lifecycle_filter(Session)
    session = Session()

    # 1. Create test data
    print("1. Creating Test Data:")
    alice = Agent(email="alice@example.com")
    bob = Agent(email="bob@example.com")
    session.add_all(
        [
            alice,
            bob,
            Ticket(subject="Printer on fire", agent=alice),
            Ticket(subject="Password reset", agent=alice),
            Ticket(subject="VPN drops hourly", agent=bob),
        ]
    )
    session.commit()
    print(f"  Agents: {len(session.query(Agent).all())}")
    print(f"  Tickets: {len(session.query(Ticket).all())}\n")

    # 2. Soft delete a ticket
    print("2. Soft Deleting a Ticket:")
    spam = session.query(Ticket).filter_by(subject="Password reset").one()
    spam.soft_delete()
    print(f"  Deleted at: {spam.deleted_at}")
    print(f"  Lookup by id: {session.get(Ticket, spam.id)}")
    print(f"  Visible tickets: {len(session.query(Ticket).all())}")
    print(f"  Stored tickets: {len(Ticket.query_all(session).all())}\n")

    # 3. Deactivate an agent
    print("3. Deactivating an Agent:")
    bob.deactivate()
    visible = [agent.email for agent in Agent.find_active_non_deleted(session)]
    print(f"  Active agents: {visible}")
    print(f"  Inactive agents: {[a.email for a in Agent.query_inactive(session)]}")
    bob.activate()
    print(f"  After reactivation: {len(session.query(Agent).all())} agents\n")

    # 4. Reaching flagged records on purpose
    print("4. Reading Flagged Records:")
    stmt = include_flagged(select(Ticket).where(Ticket.is_deleted.is_(True)))
    for ticket in session.execute(stmt).scalars():
        print(f"  {ticket.subject}: deleted on {ticket.deleted_at}")

    # 5. Counting by state
    print("\n5. Lifecycle Summary:")
    service = LifecycleService(session)
    for model in (Agent, Ticket):
        summary = service.summarize(model)
        print(
            f"  {summary.table_name}: {summary.total} total, "
            f"{summary.active} active, {summary.inactive} inactive, "
            f"{summary.deleted} deleted"
        )

    session.close()
    print("\nLifecycle example completed!")


if __name__ == "__main__":
    demonstrate_lifecycle()
