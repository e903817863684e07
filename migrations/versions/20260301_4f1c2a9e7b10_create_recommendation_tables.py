"""create_recommendation_tables

Revision ID: 4f1c2a9e7b10
Revises:
Create Date: 2026-03-01 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "4f1c2a9e7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _string_array():
    return postgresql.ARRAY(sa.String())


def upgrade() -> None:
    """Create articles, preferences, behavior, engine, feedback and insight tables"""
    op.create_table(
        "articles",
        sa.Column("id", sa.String(length=64), nullable=False, comment="Article ID (editorial system)"),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), server_default="", nullable=False, comment="Body text"),
        sa.Column("category_id", sa.String(length=64), nullable=True),
        sa.Column("category_name", sa.String(length=100), nullable=True, comment="Category display name"),
        sa.Column("tags", _string_array(), nullable=True, comment="Tag names (PostgreSQL ARRAY)"),
        sa.Column("status", sa.String(length=20), server_default="draft", nullable=False),
        sa.Column("priority", sa.String(length=20), server_default="normal", nullable=False),
        sa.Column("language", sa.String(length=5), server_default="ar", nullable=False),
        sa.Column("featured_image", sa.Text(), nullable=True, comment="Featured image URL"),
        sa.Column("views", sa.Integer(), nullable=True),
        sa.Column("likes", sa.Integer(), nullable=True),
        sa.Column("shares", sa.Integer(), nullable=True),
        sa.Column("comments", sa.Integer(), nullable=True),
        sa.Column("average_read_time", sa.Float(), nullable=True, comment="Average read time (seconds)"),
        sa.Column("click_through_rate", sa.Float(), nullable=True, comment="CTR as a fraction"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_articles_status_created_at", "articles", ["status", "created_at"])
    op.create_index("ix_articles_category_name", "articles", ["category_name"])

    op.create_table(
        "user_preferences",
        sa.Column("user_id", sa.String(length=64), nullable=False, comment="Platform user ID"),
        sa.Column("preferred_categories", _string_array(), server_default="{}", nullable=False, comment="Preferred category names"),
        sa.Column("reading_time", sa.String(length=10), server_default="medium", nullable=False),
        sa.Column("language", sa.String(length=5), server_default="ar", nullable=False),
        sa.Column("time_of_day", sa.String(length=10), server_default="evening", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "user_behaviors",
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("read_article_ids", _string_array(), server_default="{}", nullable=False),
        sa.Column("liked_article_ids", _string_array(), server_default="{}", nullable=False),
        sa.Column("shared_article_ids", _string_array(), server_default="{}", nullable=False),
        sa.Column("average_read_time", sa.Float(), server_default="0", nullable=False, comment="Rolling average read time (seconds)"),
        sa.Column("active_hours", postgresql.ARRAY(sa.Integer()), server_default="{}", nullable=False, comment="Hours of day (0-23) the user is usually active"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "engine_settings",
        sa.Column("scope", sa.String(length=64), nullable=False),
        sa.Column("personalized_weight", sa.Float(), nullable=False),
        sa.Column("trending_weight", sa.Float(), nullable=False),
        sa.Column("similarity_weight", sa.Float(), nullable=False),
        sa.Column("editorial_weight", sa.Float(), nullable=False),
        sa.Column("diversity_factor", sa.Float(), nullable=False),
        sa.Column("recency_boost", sa.Float(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.PrimaryKeyConstraint("scope"),
    )

    op.create_table(
        "issued_recommendations",
        sa.Column("id", sa.String(length=64), nullable=False, comment="rec_<hex>"),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("article_id", sa.String(length=64), nullable=False),
        sa.Column("current_article_id", sa.String(length=64), nullable=True, comment="Article being read when issued"),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("confidence", sa.Float(), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False, comment="trending/personalized/similar/editorial"),
        sa.Column("content_category", sa.String(length=100), nullable=True, comment="Article category name"),
        sa.Column("reasons", _string_array(), server_default="{}", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_issued_recommendations_user_id",
        "issued_recommendations",
        ["user_id", "created_at"],
    )

    op.create_table(
        "recommendation_feedbacks",
        sa.Column("id", sa.String(length=64), nullable=False, comment="feedback_<hex>"),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("article_id", sa.String(length=64), nullable=False),
        sa.Column("recommendation_id", sa.String(length=64), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False, comment="1-5"),
        sa.Column("helpful", sa.Boolean(), nullable=True, comment="NULL when the reader did not vote"),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("reasons", _string_array(), server_default="{}", nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True, comment="Article category name"),
        sa.Column("recommendation_score", sa.Float(), nullable=True),
        sa.Column("time_of_day", sa.String(length=10), nullable=False),
        sa.Column("session_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_recommendation_feedbacks_created_at", "recommendation_feedbacks", ["created_at"])
    op.create_index("ix_recommendation_feedbacks_user_id", "recommendation_feedbacks", ["user_id"])
    op.create_index(
        "ix_recommendation_feedbacks_recommendation_id",
        "recommendation_feedbacks",
        ["recommendation_id"],
    )

    op.create_table(
        "recommendation_insights",
        sa.Column("id", sa.String(length=64), nullable=False, comment="insight_<hex>"),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("impact", sa.String(length=10), nullable=False),
        sa.Column("confidence", sa.Integer(), nullable=False),
        sa.Column("action_items", _string_array(), server_default="{}", nullable=False),
        sa.Column("metric_before", sa.Float(), nullable=False),
        sa.Column("metric_after", sa.Float(), nullable=True),
        sa.Column("metric_target", sa.Float(), nullable=False),
        sa.Column("timeframe", sa.String(length=10), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_recommendation_insights_generated_at", "recommendation_insights", ["generated_at"])


def downgrade() -> None:
    op.drop_index("ix_recommendation_insights_generated_at", table_name="recommendation_insights")
    op.drop_table("recommendation_insights")
    op.drop_index("ix_recommendation_feedbacks_recommendation_id", table_name="recommendation_feedbacks")
    op.drop_index("ix_recommendation_feedbacks_user_id", table_name="recommendation_feedbacks")
    op.drop_index("ix_recommendation_feedbacks_created_at", table_name="recommendation_feedbacks")
    op.drop_table("recommendation_feedbacks")
    op.drop_index("ix_issued_recommendations_user_id", table_name="issued_recommendations")
    op.drop_table("issued_recommendations")
    op.drop_table("engine_settings")
    op.drop_table("user_behaviors")
    op.drop_table("user_preferences")
    op.drop_index("ix_articles_category_name", table_name="articles")
    op.drop_index("ix_articles_status_created_at", table_name="articles")
    op.drop_table("articles")
