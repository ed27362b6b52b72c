from sqlalchemy import Column, DateTime, Index, Integer, MetaData, String, Table, Text, func


metadata = MetaData()

contacts = Table(
    "contacts",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(100), nullable=False),
    Column("email", String(100), nullable=False),
    Column("phone", String(20), nullable=True),
    Column("message", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)

email_index = Index("idx_contacts_email", contacts.c.email)
created_at_index = Index("idx_contacts_created_at", contacts.c.created_at)

CONTACT_INDEXES = (email_index, created_at_index)
