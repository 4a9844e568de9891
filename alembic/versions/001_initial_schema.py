"""Initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade():
    # Администраторы
    op.create_table(
        'admins',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='admin'),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('login_ip', sa.String(length=64), nullable=True),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('reset_token', sa.Text(), nullable=True),
        sa.Column('reset_token_expires', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_admins_id'), 'admins', ['id'], unique=False)
    op.create_index(op.f('ix_admins_email'), 'admins', ['email'], unique=True)
    op.create_index(op.f('ix_admins_role'), 'admins', ['role'], unique=False)
    op.create_index(op.f('ix_admins_is_active'), 'admins', ['is_active'], unique=False)

    # Клиенты
    op.create_table(
        'clients',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='client'),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='active'),
        sa.Column('profile_image', sa.String(length=1024), nullable=False, server_default='default-profile.png'),
        sa.Column('profile_image_public_id', sa.String(length=512), nullable=True),
        sa.Column('address_country', sa.String(length=255), nullable=True),
        sa.Column('address_city', sa.String(length=255), nullable=True),
        sa.Column('address_street', sa.String(length=255), nullable=True),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('verification_token', sa.Text(), nullable=True),
        sa.Column('is_phone_verified', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('phone_verification_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('reset_token', sa.Text(), nullable=True),
        sa.Column('reset_token_expires', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_clients_id'), 'clients', ['id'], unique=False)
    op.create_index(op.f('ix_clients_email'), 'clients', ['email'], unique=True)
    op.create_index(op.f('ix_clients_phone'), 'clients', ['phone'], unique=True)
    op.create_index(op.f('ix_clients_status'), 'clients', ['status'], unique=False)

    # Блог
    op.create_table(
        'blogs',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('excerpt', sa.String(length=300), nullable=True),
        sa.Column('author_id', sa.BigInteger(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('reading_time', sa.String(length=32), nullable=True),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='draft'),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('seo_title', sa.String(length=255), nullable=True),
        sa.Column('seo_description', sa.String(length=500), nullable=True),
        sa.Column('meta_keywords', sa.JSON(), nullable=False),
        sa.Column('cover_image_url', sa.String(length=1024), nullable=False, server_default=''),
        sa.Column('cover_image_public_id', sa.String(length=512), nullable=True),
        sa.Column('cover_image_alt', sa.String(length=255), nullable=False, server_default=''),
        *_timestamps(),
        sa.ForeignKeyConstraint(['author_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_blogs_id'), 'blogs', ['id'], unique=False)
    op.create_index(op.f('ix_blogs_slug'), 'blogs', ['slug'], unique=True)
    op.create_index(op.f('ix_blogs_author_id'), 'blogs', ['author_id'], unique=False)
    op.create_index('ix_blogs_status_created_at', 'blogs', ['status', 'created_at'], unique=False)
    op.create_index('ix_blogs_author_created_at', 'blogs', ['author_id', 'created_at'], unique=False)
    op.create_index('ix_blogs_category_created_at', 'blogs', ['category', 'created_at'], unique=False)

    op.create_table(
        'blog_likes',
        sa.Column('blog_id', sa.BigInteger(), nullable=False),
        sa.Column('client_id', sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(['blog_id'], ['blogs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('blog_id', 'client_id'),
    )

    # Услуги и прайсы
    op.create_table(
        'services',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False, server_default='business'),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('is_customizable', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('delivery_time_in_days', sa.Integer(), nullable=False, server_default='7'),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
        sa.Column('thumbnail_url', sa.String(length=1024), nullable=True),
        sa.Column('thumbnail_public_id', sa.String(length=512), nullable=True),
        sa.Column('thumbnail_resource_type', sa.String(length=16), nullable=True),
        sa.Column('created_by_id', sa.BigInteger(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by_id'], ['admins.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_services_id'), 'services', ['id'], unique=False)
    op.create_index(op.f('ix_services_category'), 'services', ['category'], unique=False)
    op.create_index(op.f('ix_services_status'), 'services', ['status'], unique=False)
    op.create_index(op.f('ix_services_created_by_id'), 'services', ['created_by_id'], unique=False)

    op.create_table(
        'pricing',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('service_id', sa.BigInteger(), nullable=False),
        sa.Column('tiers', sa.JSON(), nullable=False),
        sa.Column('currency', sa.String(length=8), nullable=False, server_default='USD'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['service_id'], ['services.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('service_id'),
    )
    op.create_index(op.f('ix_pricing_id'), 'pricing', ['id'], unique=False)

    # Обращения
    op.create_table(
        'contacts',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False, server_default=''),
        sa.Column('country', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('subject', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('response_message', sa.Text(), nullable=False, server_default=''),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('ip_address', sa.String(length=64), nullable=False, server_default=''),
        sa.Column('client_id', sa.BigInteger(), nullable=True),
        sa.Column('responded_by_id', sa.BigInteger(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['responded_by_id'], ['admins.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_contacts_id'), 'contacts', ['id'], unique=False)
    op.create_index(op.f('ix_contacts_email'), 'contacts', ['email'], unique=False)
    op.create_index(op.f('ix_contacts_status'), 'contacts', ['status'], unique=False)
    op.create_index(op.f('ix_contacts_client_id'), 'contacts', ['client_id'], unique=False)

    # Заявки на вакансии
    op.create_table(
        'careers',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('position_applied', sa.String(length=255), nullable=False),
        sa.Column('resume_url', sa.String(length=1024), nullable=False),
        sa.Column('resume_public_id', sa.String(length=512), nullable=False),
        sa.Column('resume_resource_type', sa.String(length=16), nullable=False),
        sa.Column('cover_letter_url', sa.String(length=1024), nullable=True),
        sa.Column('cover_letter_public_id', sa.String(length=512), nullable=True),
        sa.Column('cover_letter_resource_type', sa.String(length=16), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='Applied'),
        sa.Column('source', sa.String(length=32), nullable=False, server_default='Website'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_careers_id'), 'careers', ['id'], unique=False)
    op.create_index(op.f('ix_careers_email'), 'careers', ['email'], unique=False)
    op.create_index(op.f('ix_careers_position_applied'), 'careers', ['position_applied'], unique=False)
    op.create_index(op.f('ix_careers_status'), 'careers', ['status'], unique=False)

    # Клиентские заявки на услуги
    op.create_table(
        'client_service_requests',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False, server_default='custom'),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('budget', sa.Float(), nullable=True),
        sa.Column('delivery_deadline', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='pending'),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('created_by_id', sa.BigInteger(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_client_service_requests_id'), 'client_service_requests', ['id'], unique=False)
    op.create_index(op.f('ix_client_service_requests_status'), 'client_service_requests', ['status'], unique=False)
    op.create_index(
        op.f('ix_client_service_requests_created_by_id'), 'client_service_requests', ['created_by_id'], unique=False
    )

    op.create_table(
        'service_request_attachments',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('request_id', sa.BigInteger(), nullable=False),
        sa.Column('url', sa.String(length=1024), nullable=False),
        sa.Column('public_id', sa.String(length=512), nullable=False),
        sa.Column('resource_type', sa.String(length=16), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['request_id'], ['client_service_requests.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_service_request_attachments_id'), 'service_request_attachments', ['id'], unique=False)
    op.create_index(
        op.f('ix_service_request_attachments_request_id'), 'service_request_attachments', ['request_id'], unique=False
    )
    op.create_index(
        op.f('ix_service_request_attachments_public_id'), 'service_request_attachments', ['public_id'], unique=False
    )


def downgrade():
    op.drop_table('service_request_attachments')
    op.drop_table('client_service_requests')
    op.drop_table('careers')
    op.drop_table('contacts')
    op.drop_table('pricing')
    op.drop_table('services')
    op.drop_table('blog_likes')
    op.drop_table('blogs')
    op.drop_table('clients')
    op.drop_table('admins')
