"""create_social_tables

Revision ID: 4c1d7e9a2b60
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c1d7e9a2b60'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, contacts, likes, matches and notifications."""

    # --- profiles ---
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('external_identity', sa.UUID(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False,
                  server_default=''),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_identity'),
        sa.UniqueConstraint('phone'),
    )
    op.create_index('ix_profiles_username_lower', 'profiles',
                    [sa.text('lower(username)')], unique=True)

    # --- contacts (address book entries, one per owner and phone) ---
    op.create_table('contacts',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('owner_id', sa.UUID(), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('linked_profile_id', sa.UUID(), nullable=True),
        sa.Column('is_imported', sa.Boolean(), nullable=False,
                  server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.ForeignKeyConstraint(['owner_id'], ['profiles.id'],
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['linked_profile_id'], ['profiles.id'],
                                ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('owner_id', 'phone_number'),
    )
    op.create_index('ix_contacts_owner_id', 'contacts', ['owner_id'])
    op.create_index('ix_contacts_linked_profile_id', 'contacts',
                    ['linked_profile_id'])
    # Second-degree expansion reads linked contacts of many owners at once.
    op.create_index('idx_contacts_owner_linked', 'contacts',
                    ['owner_id', 'created_at'],
                    postgresql_where=sa.text('linked_profile_id IS NOT NULL'))

    # --- likes ---
    op.create_table('likes',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('liker_id', sa.UUID(), nullable=False),
        sa.Column('liked_id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.ForeignKeyConstraint(['liker_id'], ['profiles.id'],
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['liked_id'], ['profiles.id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('liker_id', 'liked_id'),
        sa.CheckConstraint('liker_id <> liked_id', name='ck_likes_not_self'),
    )
    op.create_index('ix_likes_liker_id', 'likes', ['liker_id'])
    op.create_index('ix_likes_liked_id', 'likes', ['liked_id'])

    # --- unregistered_likes (keyed by phone numbers) ---
    op.create_table('unregistered_likes',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('liker_phone', sa.String(length=20), nullable=False),
        sa.Column('liked_phone', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('liker_phone', 'liked_phone'),
    )
    op.create_index('ix_unregistered_likes_liker_phone',
                    'unregistered_likes', ['liker_phone'])
    op.create_index('ix_unregistered_likes_liked_phone',
                    'unregistered_likes', ['liked_phone'])

    # --- matches (one row per unordered pair, user_a < user_b) ---
    op.create_table('matches',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_a', sa.UUID(), nullable=False),
        sa.Column('user_b', sa.UUID(), nullable=False),
        sa.Column('matched_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.ForeignKeyConstraint(['user_a'], ['profiles.id'],
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_b'], ['profiles.id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_a', 'user_b'),
        sa.CheckConstraint('user_a < user_b', name='ck_matches_ordered_pair'),
    )
    op.create_index('ix_matches_user_a', 'matches', ['user_a'])
    op.create_index('ix_matches_user_b', 'matches', ['user_b'])

    # --- notifications ---
    op.create_table('notifications',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('kind', sa.String(length=20), nullable=False),
        sa.Column('payload', postgresql.JSONB(), nullable=True,
                  server_default='{}'),
        sa.Column('created_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.Column('is_read', sa.Boolean(), nullable=False,
                  server_default='false'),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("kind IN ('like', 'match')",
                           name='ck_notifications_kind'),
    )
    op.create_index('ix_notifications_user_created', 'notifications',
                    ['user_id', 'created_at'])
    op.create_index('idx_notifications_unread', 'notifications',
                    ['user_id'],
                    postgresql_where=sa.text('is_read = false'))


def downgrade() -> None:
    """Drop all social tables."""
    op.drop_index('idx_notifications_unread', table_name='notifications')
    op.drop_index('ix_notifications_user_created', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_matches_user_b', table_name='matches')
    op.drop_index('ix_matches_user_a', table_name='matches')
    op.drop_table('matches')
    op.drop_index('ix_unregistered_likes_liked_phone',
                  table_name='unregistered_likes')
    op.drop_index('ix_unregistered_likes_liker_phone',
                  table_name='unregistered_likes')
    op.drop_table('unregistered_likes')
    op.drop_index('ix_likes_liked_id', table_name='likes')
    op.drop_index('ix_likes_liker_id', table_name='likes')
    op.drop_table('likes')
    op.drop_index('idx_contacts_owner_linked', table_name='contacts')
    op.drop_index('ix_contacts_linked_profile_id', table_name='contacts')
    op.drop_index('ix_contacts_owner_id', table_name='contacts')
    op.drop_table('contacts')
    op.drop_index('ix_profiles_username_lower', table_name='profiles')
    op.drop_table('profiles')
