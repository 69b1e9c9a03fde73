"""Initial schema: hosts, canvases, events, bookings, stripe events

Revision ID: 001
Revises: 
Create Date: 2026-01-10 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

onboarding_status = sa.Enum('NOT_STARTED', 'IN_PROGRESS', 'COMPLETE', 'RESTRICTED', name='onboardingstatus')
event_status = sa.Enum('DRAFT', 'PUBLISHED', 'ENDED', 'CANCELED', name='eventstatus')
booking_status = sa.Enum('PENDING', 'PAID', 'REFUNDED', 'CANCELED', name='bookingstatus')


def upgrade() -> None:
    # Users (hosts) with cached connected-account status
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('stripe_account_id', sa.String(), nullable=True),
        sa.Column('stripe_onboarding_status', onboarding_status, nullable=False, server_default='NOT_STARTED'),
        sa.Column('stripe_details_submitted', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('stripe_charges_enabled', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('stripe_payouts_enabled', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('stripe_requirements', postgresql.JSON(astext_type=sa.Text()), nullable=True),
        sa.Column('stripe_disabled_reason', sa.String(), nullable=True),
        sa.Column('stripe_last_synced_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_stripe_account_id', 'users', ['stripe_account_id'], unique=True)

    # Canvas catalogue
    op.create_table(
        'canvases',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=False),
        sa.Column('tags', postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    # Events
    op.create_table(
        'events',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('host_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date_time', sa.DateTime(), nullable=False),
        sa.Column('end_date_time', sa.DateTime(), nullable=True),
        sa.Column('location_name', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('state', sa.String(2), nullable=False),
        sa.Column('zip', sa.String(10), nullable=False),
        sa.Column('ticket_price_cents', sa.Integer(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('sales_cutoff_hours', sa.Integer(), nullable=False, server_default='48'),
        sa.Column('refund_policy_text', sa.Text(), nullable=True),
        sa.Column('canvas_image_url', sa.String(), nullable=True),
        sa.Column('canvas_id', sa.String(), nullable=True),
        sa.Column('status', event_status, nullable=False, server_default='DRAFT'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['host_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['canvas_id'], ['canvases.id'], ),
    )
    op.create_index('ix_events_host_id', 'events', ['host_id'])
    op.create_index('ix_events_slug', 'events', ['slug'], unique=True)
    op.create_index('ix_events_start_date_time', 'events', ['start_date_time'])
    op.create_index('ix_events_status', 'events', ['status'])

    # Bookings
    op.create_table(
        'bookings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('event_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('purchaser_name', sa.String(), nullable=False),
        sa.Column('purchaser_email', sa.String(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('amount_paid_cents', sa.Integer(), nullable=False),
        sa.Column('status', booking_status, nullable=False, server_default='PENDING'),
        sa.Column('stripe_checkout_session_id', sa.String(), nullable=True),
        sa.Column('stripe_payment_intent_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ),
        sa.CheckConstraint('quantity >= 1', name='ck_bookings_quantity_positive'),
    )
    op.create_index('ix_bookings_event_id', 'bookings', ['event_id'])
    op.create_index('ix_bookings_purchaser_email', 'bookings', ['purchaser_email'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])
    op.create_index('ix_bookings_stripe_checkout_session_id', 'bookings', ['stripe_checkout_session_id'], unique=True)
    op.create_index('ix_bookings_stripe_payment_intent_id', 'bookings', ['stripe_payment_intent_id'])
    op.create_index('ix_bookings_created_at', 'bookings', ['created_at'])

    # Verified webhook events
    op.create_table(
        'stripe_events',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('stripe_event_id', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('source', sa.String(), nullable=False),
        sa.Column('payload', postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column('processed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('received_at', sa.DateTime(), nullable=False),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_stripe_events_stripe_event_id', 'stripe_events', ['stripe_event_id'], unique=True)
    op.create_index('ix_stripe_events_type', 'stripe_events', ['type'])
    op.create_index('ix_stripe_events_processed', 'stripe_events', ['processed'])
    op.create_index('ix_stripe_events_received_at', 'stripe_events', ['received_at'])


def downgrade() -> None:
    op.drop_table('stripe_events')
    op.drop_table('bookings')
    op.drop_table('events')
    op.drop_table('canvases')
    op.drop_table('users')
    booking_status.drop(op.get_bind(), checkfirst=True)
    event_status.drop(op.get_bind(), checkfirst=True)
    onboarding_status.drop(op.get_bind(), checkfirst=True)
