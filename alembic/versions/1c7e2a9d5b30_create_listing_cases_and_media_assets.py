"""create users, listing cases, media assets and history tables

Revision ID: 1c7e2a9d5b30
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1c7e2a9d5b30'
down_revision = None
branch_labels = None
depends_on = None


def _enum(name, *values):
    return sa.Enum(*values, name=name, native_enum=False, length=32)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('role', _enum('userrole', 'Agent', 'PhotographyCompany'), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'photography_companies',
        sa.Column('id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('photography_company_name', sa.String(), nullable=False),
    )

    op.create_table(
        'agents',
        sa.Column('id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('agent_first_name', sa.String(), nullable=False),
        sa.Column('agent_last_name', sa.String(), nullable=False),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('company_name', sa.String(), nullable=False),
    )

    op.create_table(
        'agent_photography_companies',
        sa.Column('agent_id', sa.String(), sa.ForeignKey('agents.id', ondelete='CASCADE'), primary_key=True),
        sa.Column(
            'photography_company_id',
            sa.String(),
            sa.ForeignKey('photography_companies.id', ondelete='CASCADE'),
            primary_key=True,
        ),
    )

    op.create_table(
        'listing_cases',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('street', sa.String(50), nullable=False),
        sa.Column('city', sa.String(50), nullable=False),
        sa.Column('state', sa.String(8), nullable=False),
        sa.Column('postcode', sa.Integer(), nullable=False),
        sa.Column('longitude', sa.Numeric(9, 6), nullable=False),
        sa.Column('latitude', sa.Numeric(9, 6), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Integer(), nullable=False),
        sa.Column('garages', sa.Integer(), nullable=False),
        sa.Column('floor_area', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            'property_type',
            _enum('propertytype', 'House', 'Unit', 'Townhouse', 'Villa', 'Other'),
            nullable=False,
        ),
        sa.Column('sale_category', _enum('salecategory', 'ForSale', 'ForRent', 'Auction'), nullable=False),
        sa.Column(
            'listing_case_status',
            _enum('listingcasestatus', 'Created', 'Pending', 'Delivered'),
            nullable=False,
        ),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
    )
    op.create_index('ix_listing_cases_user_id', 'listing_cases', ['user_id'])
    op.create_index('idx_listing_case_owner_deleted', 'listing_cases', ['user_id', 'is_deleted'])

    op.create_table(
        'agent_listing_cases',
        sa.Column('agent_id', sa.String(), sa.ForeignKey('agents.id', ondelete='CASCADE'), primary_key=True),
        sa.Column(
            'listing_case_id',
            sa.Integer(),
            sa.ForeignKey('listing_cases.id', ondelete='CASCADE'),
            primary_key=True,
        ),
    )

    op.create_table(
        'case_contacts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('company_name', sa.String(), nullable=True),
        sa.Column('profile_url', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone_number', sa.String(), nullable=True),
        sa.Column(
            'listing_case_id',
            sa.Integer(),
            sa.ForeignKey('listing_cases.id', ondelete='CASCADE'),
            nullable=False,
        ),
    )
    op.create_index('ix_case_contacts_listing_case_id', 'case_contacts', ['listing_case_id'])

    op.create_table(
        'media_assets',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'media_type',
            _enum('mediatype', 'Photo', 'Video', 'FloorPlan', 'VRTour'),
            nullable=False,
        ),
        sa.Column('media_url', sa.String(), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_select', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_hero', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            'listing_case_id',
            sa.Integer(),
            sa.ForeignKey('listing_cases.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_media_assets_listing_case_id', 'media_assets', ['listing_case_id'])
    op.create_index('idx_media_assets_case_selected', 'media_assets', ['listing_case_id', 'is_select'])
    # At most one live hero per listing case
    op.create_index(
        'ux_media_assets_listing_case_hero',
        'media_assets',
        ['listing_case_id'],
        unique=True,
        postgresql_where=sa.text("is_hero AND NOT is_deleted"),
        sqlite_where=sa.text("is_hero AND NOT is_deleted"),
    )

    op.create_table(
        'case_histories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('listing_case_id', sa.Integer(), nullable=False),
        sa.Column('case_title', sa.String(), nullable=False),
        sa.Column('change', sa.String(32), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_case_histories_listing_case_id', 'case_histories', ['listing_case_id'])

    op.create_table(
        'media_asset_histories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('media_asset_id', sa.Integer(), nullable=False),
        sa.Column('media_url', sa.String(), nullable=False),
        sa.Column('listing_case_id', sa.Integer(), nullable=False),
        sa.Column('listing_case_title', sa.String(), nullable=False),
        sa.Column('change', sa.String(32), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_media_asset_histories_media_asset_id', 'media_asset_histories', ['media_asset_id'])
    op.create_index('idx_media_asset_history_case', 'media_asset_histories', ['listing_case_id', 'occurred_at'])


def downgrade() -> None:
    op.drop_table('media_asset_histories')
    op.drop_table('case_histories')
    op.drop_index('ux_media_assets_listing_case_hero', table_name='media_assets')
    op.drop_table('media_assets')
    op.drop_table('case_contacts')
    op.drop_table('agent_listing_cases')
    op.drop_table('listing_cases')
    op.drop_table('agent_photography_companies')
    op.drop_table('agents')
    op.drop_table('photography_companies')
    op.drop_table('users')
