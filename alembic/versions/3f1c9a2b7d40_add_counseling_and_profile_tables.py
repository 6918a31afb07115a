"""Add counseling and profile tables

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2025-09-02 14:12:31.204118

"""
from datetime import datetime, timezone
from typing import Sequence, Union
import uuid

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Built-in categories as of this revision
SEED_CATEGORIES = [
    {
        "name": "Career",
        "description": "Work, job changes and professional growth",
        "icon": "Briefcase",
        "color": "#F59E0B",
        "initial_questions": [
            {"id": "career-situation", "text": "What is happening at work right now?", "type": "text", "required": True, "order": 0},
            {
                "id": "career-focus",
                "text": "Which area do you want to focus on?",
                "type": "select",
                "options": ["Job search", "Workplace relationships", "Burnout", "Career change"],
                "required": True,
                "order": 1,
            },
        ],
    },
    {
        "name": "Family",
        "description": "Parents, siblings, children and home life",
        "icon": "Users",
        "color": "#10B981",
        "initial_questions": [
            {"id": "family-who", "text": "Who in your family is this about?", "type": "text", "required": True, "order": 0},
            {"id": "family-stress", "text": "How stressful does it feel right now?", "type": "scale", "required": False, "order": 1},
        ],
    },
    {
        "name": "Mental Health",
        "description": "Stress, anxiety, mood and emotional wellbeing",
        "icon": "Brain",
        "color": "#8B5CF6",
        "initial_questions": [
            {
                "id": "mood-today",
                "text": "How would you describe your mood today?",
                "type": "multiselect",
                "options": ["Anxious", "Sad", "Tired", "Calm", "Angry"],
                "required": True,
                "order": 0,
            },
            {"id": "mood-intensity", "text": "How intense is this feeling?", "type": "scale", "required": False, "order": 1},
        ],
    },
    {
        "name": "Other",
        "description": "Anything that does not fit another category",
        "icon": "HelpCircle",
        "color": "#6B7280",
        "initial_questions": [
            {"id": "other-topic", "text": "What would you like to talk about?", "type": "text", "required": True, "order": 0},
        ],
    },
    {
        "name": "Relationships",
        "description": "Dating, partners, friendships and breakups",
        "icon": "Heart",
        "color": "#EC4899",
        "initial_questions": [
            {"id": "relationship-type", "text": "What kind of relationship is this about?", "type": "select", "options": ["Partner", "Friend", "Colleague", "Other"], "required": True, "order": 0},
            {"id": "relationship-issue", "text": "What is the main concern?", "type": "text", "required": True, "order": 1},
        ],
    },
    {
        "name": "Self-Growth",
        "description": "Habits, goals and self-understanding",
        "icon": "Target",
        "color": "#3B82F6",
        "initial_questions": [
            {"id": "growth-goal", "text": "What goal are you working toward?", "type": "text", "required": True, "order": 0},
        ],
    },
    {
        "name": "Study",
        "description": "School, exams and learning",
        "icon": "BookOpen",
        "color": "#14B8A6",
        "initial_questions": [
            {"id": "study-level", "text": "What are you studying?", "type": "text", "required": False, "order": 0},
            {"id": "study-pressure", "text": "How much pressure do you feel?", "type": "scale", "required": False, "order": 1},
        ],
    },
]


def upgrade() -> None:
    categories = op.create_table(
        'counseling_categories',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon', sa.String(), nullable=False),
        sa.Column('color', sa.String(), nullable=False),
        sa.Column('initial_questions', postgresql.JSONB(), nullable=False),
        sa.Column('is_custom', sa.Boolean(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_counseling_categories_is_custom', 'counseling_categories', ['is_custom'])
    op.create_index('ix_counseling_categories_user_id', 'counseling_categories', ['user_id'])

    op.create_table(
        'counseling_sessions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('category_id', sa.String(), sa.ForeignKey('counseling_categories.id'), nullable=False),
        sa.Column('counselor_id', sa.String(), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('status', sa.Enum('active', 'paused', 'completed', 'archived', name='session_status'), nullable=False),
        sa.Column('initial_responses', postgresql.JSONB(), nullable=False),
        sa.Column('metadata', postgresql.JSONB(), nullable=False),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('thumbnail', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_activity_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_counseling_sessions_user_id', 'counseling_sessions', ['user_id'])
    op.create_index('ix_counseling_sessions_category_id', 'counseling_sessions', ['category_id'])
    op.create_index('ix_counseling_sessions_last_activity_at', 'counseling_sessions', ['last_activity_at'])

    op.create_table(
        'counseling_messages',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('session_id', sa.String(), sa.ForeignKey('counseling_sessions.id'), nullable=False),
        sa.Column('sender_id', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('message_type', sa.Enum('text', 'image', 'file', 'system', name='message_type'), nullable=False),
        sa.Column('is_bookmarked', sa.Boolean(), nullable=False),
        sa.Column('metadata', postgresql.JSONB(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_counseling_messages_session_id', 'counseling_messages', ['session_id'])
    op.create_index('ix_counseling_messages_created_at', 'counseling_messages', ['created_at'])

    op.create_table(
        'profiles',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('nickname', sa.String(length=50), nullable=False),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_profiles_id', 'profiles', ['id'])

    now = datetime.now(timezone.utc)
    op.bulk_insert(
        categories,
        [
            {
                'id': str(uuid.uuid4()),
                'is_custom': False,
                'user_id': None,
                'created_at': now,
                **category,
            }
            for category in SEED_CATEGORIES
        ],
    )


def downgrade() -> None:
    op.drop_table('profiles')
    op.drop_table('counseling_messages')
    op.drop_table('counseling_sessions')
    op.drop_table('counseling_categories')
    op.execute('DROP TYPE message_type')
    op.execute('DROP TYPE session_status')
