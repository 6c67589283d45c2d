"""Create breeds, shelters, adopters, adoptable_dogs and fav_dogs

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial Petly schema.
How:   Mirrors petly/models/*. Foreign keys: adoptable_dogs → breeds,
       adoptable_dogs → shelters (cascade), fav_dogs → adopters (cascade).
       fav_dogs.dog_id is text with no foreign key (local or remote dog).

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "breeds",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("breed", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("breed"),
    )

    op.create_table(
        "shelters",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("address", sa.Text(), nullable=False, server_default=""),
        sa.Column("city", sa.Text(), nullable=False),
        sa.Column("state", sa.String(2), nullable=False),
        sa.Column("postcode", sa.String(10), nullable=False, server_default=""),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("logo", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "adopters",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("picture", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("private_outdoors", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("num_of_dogs", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("preferred_gender", sa.String(10), nullable=True),
        sa.Column("preferred_age", sa.String(10), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "adoptable_dogs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("breed_id", sa.Integer(), nullable=True),
        sa.Column("gender", sa.String(10), nullable=True),
        sa.Column("age", sa.String(10), nullable=True),
        sa.Column("picture", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("good_w_kids", sa.Boolean(), nullable=True),
        sa.Column("good_w_dogs", sa.Boolean(), nullable=True),
        sa.Column("good_w_cats", sa.Boolean(), nullable=True),
        sa.Column("shelter_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["breed_id"], ["breeds.id"]),
        sa.ForeignKeyConstraint(["shelter_id"], ["shelters.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_adoptable_dogs_shelter_id", "adoptable_dogs", ["shelter_id"])

    op.create_table(
        "fav_dogs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("adopter_id", sa.Integer(), nullable=False),
        sa.Column("dog_id", sa.String(64), nullable=False),
        sa.ForeignKeyConstraint(["adopter_id"], ["adopters.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("adopter_id", "dog_id", name="uq_fav_dogs_adopter_dog"),
    )


def downgrade() -> None:
    op.drop_table("fav_dogs")
    op.drop_index("idx_adoptable_dogs_shelter_id", table_name="adoptable_dogs")
    op.drop_table("adoptable_dogs")
    op.drop_table("adopters")
    op.drop_table("shelters")
    op.drop_table("breeds")
