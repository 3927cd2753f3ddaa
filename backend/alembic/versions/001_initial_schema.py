"""Initial schema: ranks, requirements, persons, promotions, groups, sessions, attendance.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

Every foreign key is ON DELETE CASCADE. Table and column names keep the
tkd-core_ prefix and the mixed-case column names of the existing schema.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _t(name: str) -> str:
    return f"tkd-core_{name}"


def _fk(table: str) -> sa.ForeignKey:
    return sa.ForeignKey(f"{_t(table)}.id", ondelete="CASCADE")


attendance_status = sa.Enum("present", "absent", "excused", name="attendance_status")

# (table, column) pairs indexed by the ORM models (index=True)
_INDEXES = [
    ("persons", "user_id"),
    ("rankPromotion", "studentId"),
    ("personGroup", "personId"),
    ("personGroup", "groupId"),
    ("classSessionGroup", "session_id"),
]


def upgrade() -> None:
    op.create_table(
        _t("ranks"),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(250), nullable=False, unique=True),
        sa.Column("prevRank", sa.String(250), nullable=False),
        sa.Column("nextRank", sa.String(250), nullable=False),
    )

    op.create_table(
        _t("rankRequirement"),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("rankId", sa.Integer, _fk("ranks"), nullable=False),
        sa.Column("name", sa.String(250), nullable=False),
        sa.Column("levelNeeded", sa.SmallInteger, nullable=False),
        sa.Column("isTimeRequired", sa.Boolean, server_default=sa.false()),
        sa.UniqueConstraint("rankId", "name", name="rank_requirement_rank_name_key"),
        sa.CheckConstraint('"levelNeeded" >= 0', name="rank_requirement_level_check"),
    )

    op.create_table(
        _t("persons"),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("firstName", sa.String(200), nullable=False),
        sa.Column("height", sa.BigInteger, nullable=False),
        sa.Column("weight", sa.BigInteger, nullable=False),
        sa.Column("lastName", sa.String(200), nullable=False),
        sa.Column("currentRank", sa.Integer, _fk("ranks"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("user_id", sa.Text, nullable=False),
        sa.Column("isCoach", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("birthDate", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        _t("rankRequirementPerson"),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("requirement_id", sa.Integer, _fk("rankRequirement"), nullable=False),
        sa.Column("person_id", sa.Integer, _fk("persons"), nullable=False),
        sa.Column("level", sa.SmallInteger, nullable=False),
        sa.UniqueConstraint("requirement_id", "person_id", name="rank_requirement_person_key"),
    )

    op.create_table(
        _t("rankPromotion"),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("fromRank", sa.Integer, _fk("ranks"), nullable=False),
        sa.Column("toRank", sa.Integer, _fk("ranks"), nullable=False),
        sa.Column("success", sa.Boolean, nullable=True),
        sa.Column("observations", sa.Text, nullable=True),
        sa.Column("coachId", sa.Integer, _fk("persons"), nullable=False),
        sa.Column("studentId", sa.Integer, _fk("persons"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        _t("groups"),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
    )

    op.create_table(
        _t("personGroup"),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("personId", sa.Integer, _fk("persons"), nullable=False),
        sa.Column("groupId", sa.Integer, _fk("groups"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("removed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "removed_at IS NULL OR removed_at >= created_at",
            name="person_group_removed_after_joined",
        ),
    )

    op.create_table(
        _t("classSession"),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("coach_id", sa.Integer, _fk("persons"), nullable=False),
        sa.CheckConstraint("end_time > start_time", name="class_session_window_check"),
    )

    op.create_table(
        _t("classSessionGroup"),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("session_id", sa.Integer, _fk("classSession"), nullable=False),
        sa.Column("group_id", sa.Integer, _fk("groups"), nullable=False),
    )

    op.create_table(
        _t("attendance"),
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("session_id", sa.Integer, _fk("classSession"), nullable=False),
        sa.Column("person_id", sa.Integer, _fk("persons"), nullable=False),
        sa.Column("status", attendance_status, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.UniqueConstraint("session_id", "person_id", name="attendance_session_person_key"),
    )

    for table, column in _INDEXES:
        op.create_index(f"ix_{_t(table)}_{column}", _t(table), [column])


def downgrade() -> None:
    for table, column in _INDEXES:
        op.drop_index(f"ix_{_t(table)}_{column}", table_name=_t(table))
    op.drop_table(_t("attendance"))
    op.drop_table(_t("classSessionGroup"))
    op.drop_table(_t("classSession"))
    op.drop_table(_t("personGroup"))
    op.drop_table(_t("groups"))
    op.drop_table(_t("rankPromotion"))
    op.drop_table(_t("rankRequirementPerson"))
    op.drop_table(_t("persons"))
    op.drop_table(_t("rankRequirement"))
    op.drop_table(_t("ranks"))
    attendance_status.drop(op.get_bind(), checkfirst=True)
