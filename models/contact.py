from datetime import datetime
from models.db import db


class Contact(db.Model):
    __tablename__ = "contacts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(200), nullable=True)
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="new")  # new, read, replied, archived
    ip_address = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    replies = db.relationship(
        "ContactReply",
        backref="contact",
        cascade="all, delete-orphan",
        order_by="ContactReply.created_at",
    )


class ContactReply(db.Model):
    __tablename__ = "contact_replies"

    id = db.Column(db.Integer, primary_key=True)
    contact_id = db.Column(db.Integer, db.ForeignKey("contacts.id"), nullable=False, index=True)
    message = db.Column(db.Text, nullable=False)
    sent_by = db.Column(db.String(120), nullable=False, default="admin")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
