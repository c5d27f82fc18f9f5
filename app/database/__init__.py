# Import models so they are registered on Base.metadata
from .models import *
from .models import Base, Profile, SubscriptionPeriod, ProfileInteraction, PaymentOrder, AbuseReport, Message
from .connection import init_database, close_database, create_tables, get_db, get_session
