from .db import db
from .admin_user import AdminUser
from .audit_log import AuditLog
from .session import Session
from .ip_rate_limit import IpRateLimit
from .product import Product
from .reservation import Reservation
from .contact import Contact, ContactReply
from .newsletter import NewsletterSubscriber, NewsletterPost
from .product_notification import ProductNotification
