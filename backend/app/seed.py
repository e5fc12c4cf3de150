"""
Database seed script.
Creates tables and loads sample orders, conversations, transactions,
approval-queue entries and the initial system status record.
Run with: python -m app.seed
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select

from app.core.database import async_session_factory, create_tables
from app.core.logging import setup_logging, get_logger
from app.models.approval import PendingOrderApproval, PendingUserApproval
from app.models.conversation import Conversation, Message
from app.models.order import Order
from app.models.system_status import SystemStatus
from app.models.transaction import Transaction
from app.services.system_service import INITIAL_SNAPSHOT


SAMPLE_ORDERS = [
    {
        "order_no": "ORD-001",
        "customer_name": "John Doe",
        "customer_initials": "JD",
        "items": "iPhone 14 Pro, AirPods",
        "delivery_info": "123 Main St, Singapore",
        "payment_status": "paid",
        "order_status": "preparing",
        "amount": "1299.00",
        "age": timedelta(hours=2),
    },
    {
        "order_no": "ORD-002",
        "customer_name": "Alice Smith",
        "customer_initials": "AS",
        "items": "MacBook Air, Magic Mouse",
        "delivery_info": "456 Oak Ave, Singapore",
        "payment_status": "pending",
        "order_status": "received",
        "amount": "1599.00",
        "age": timedelta(days=1),
    },
    {
        "order_no": "ORD-003",
        "customer_name": "Mark Tan",
        "customer_initials": "MT",
        "items": ["Orange juice drink", "Graphic t-shirt"],
        "delivery_info": "Pickup at store",
        "payment_status": "paid",
        "order_status": "ready",
        "amount": None,
        "total": Decimal("42.50"),
        "age": timedelta(days=35),
    },
]

SAMPLE_CONVERSATIONS = [
    {
        "name": "John Doe",
        "initials": "JD",
        "last_message": "When will my order arrive?",
        "time": "2m",
        "unread_count": 2,
        "is_online": True,
        "platform": "telegram_bot",
        "messages": [
            {"content": "Hi, I placed order ORD-001.", "is_from_bot": False, "timestamp": "2:30 PM"},
            {"content": "When will my order arrive?", "is_from_bot": False, "timestamp": "2:33 PM"},
        ],
    },
    {
        "name": "Sarah Lee",
        "initials": "SL",
        "last_message": "Thank you!",
        "time": "1h",
        "unread_count": 0,
        "is_online": False,
        "platform": "telegram_personal",
        "messages": [],
    },
    {
        "name": "Mike Chen",
        "initials": "MC",
        "last_message": "Is the MacBook still available?",
        "time": "3h",
        "unread_count": 1,
        "is_online": False,
        "platform": "messenger",
        "messages": [],
    },
]

SAMPLE_TRANSACTIONS = [
    {
        "transaction_id": "TXN-12345",
        "description": "Payment from John Doe",
        "amount": "+$1,299.00",
        "type": "credit",
        "time": "2 mins ago",
    },
    {
        "transaction_id": "TXN-12346",
        "description": "Withdrawal to bank",
        "amount": "-$5,000.00",
        "type": "debit",
        "time": "1 hour ago",
    },
]

SAMPLE_PENDING_USERS = ["@new_customer_01", "@new_customer_02"]
SAMPLE_PENDING_ORDERS = ["ORD-002"]


async def seed_database():
    """Seed the database with initial data. Existing rows are left alone."""
    setup_logging()
    logger = get_logger("seed")

    logger.info("🌱 Starting database seed...")

    await create_tables()
    logger.info("✅ Database tables created/verified")

    now = datetime.now(timezone.utc)

    async with async_session_factory() as session:
        # ── Orders ───────────────────────────────────────────────────────
        created_orders = 0
        for sample in SAMPLE_ORDERS:
            data = dict(sample)
            age = data.pop("age")
            result = await session.execute(
                select(Order.id).where(Order.order_no == data["order_no"])
            )
            if result.scalar_one_or_none():
                continue
            session.add(Order(**data, created_at=now - age))
            created_orders += 1
        await session.commit()
        logger.info("✅ Orders: %d created", created_orders)

        # ── Conversations ────────────────────────────────────────────────
        result = await session.execute(select(Conversation.id).limit(1))
        if result.scalar_one_or_none():
            logger.info("⏭️  Conversations already exist, skipping")
        else:
            for sample in SAMPLE_CONVERSATIONS:
                data = dict(sample)
                messages = data.pop("messages")
                conversation = Conversation(**data)
                session.add(conversation)
                await session.flush()
                for offset, message in enumerate(messages):
                    session.add(Message(
                        conversation_id=conversation.id,
                        created_at=now + timedelta(seconds=offset),
                        **message,
                    ))
            await session.commit()
            logger.info("✅ Conversations: %d created", len(SAMPLE_CONVERSATIONS))

        # ── Transactions ─────────────────────────────────────────────────
        created_transactions = 0
        for sample in SAMPLE_TRANSACTIONS:
            result = await session.execute(
                select(Transaction.id).where(
                    Transaction.transaction_id == sample["transaction_id"]
                )
            )
            if result.scalar_one_or_none():
                continue
            session.add(Transaction(**sample))
            created_transactions += 1
        await session.commit()
        logger.info("✅ Transactions: %d created", created_transactions)

        # ── Approval queues ──────────────────────────────────────────────
        result = await session.execute(select(PendingUserApproval.id).limit(1))
        if not result.scalar_one_or_none():
            for reference in SAMPLE_PENDING_USERS:
                session.add(PendingUserApproval(reference=reference))
            for reference in SAMPLE_PENDING_ORDERS:
                session.add(PendingOrderApproval(reference=reference))
            await session.commit()
            logger.info(
                "✅ Approval queues: %d users, %d orders",
                len(SAMPLE_PENDING_USERS), len(SAMPLE_PENDING_ORDERS),
            )

        # ── System status ────────────────────────────────────────────────
        result = await session.execute(select(SystemStatus.id).limit(1))
        if result.scalar_one_or_none():
            logger.info("⏭️  System status already exists, skipping")
        else:
            session.add(SystemStatus(**INITIAL_SNAPSHOT, revision=1))
            await session.commit()
            logger.info("✅ System status record created")

    logger.info("🎉 Database seed complete!")


if __name__ == "__main__":
    from app.core.config import get_settings

    if get_settings().APP_ENV == "production":
        raise SystemExit("Refusing to seed a production database.")
    asyncio.run(seed_database())
