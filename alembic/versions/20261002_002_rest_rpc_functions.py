"""Server-side defaults and RPC functions for the REST backend

Revision ID: 002
Revises: 001
Create Date: 2026-10-02

PostgreSQL only (no-op elsewhere). The Supabase/PostgREST backend inserts
rows without ids or timestamps, so those get database defaults here, and
the two operations that must be atomic run as plpgsql functions exposed
at /rest/v1/rpc:
- submit_rating: lock project, insert rating, recompute aggregate
- set_featured_project: un-feature all others and feature one
"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


SUBMIT_RATING = """
CREATE OR REPLACE FUNCTION submit_rating(
    p_project_id text,
    p_user_id text,
    p_rating integer,
    p_review text DEFAULT NULL
) RETURNS json
LANGUAGE plpgsql
AS $$
DECLARE
    v_project projects%ROWTYPE;
    v_rating ratings%ROWTYPE;
    v_count integer;
    v_total bigint;
BEGIN
    SELECT * INTO v_project FROM projects WHERE id = p_project_id FOR UPDATE;
    IF NOT FOUND THEN
        RAISE EXCEPTION USING ERRCODE = 'no_data_found', MESSAGE = 'project';
    END IF;
    IF NOT EXISTS (SELECT 1 FROM users WHERE id = p_user_id) THEN
        RAISE EXCEPTION USING ERRCODE = 'no_data_found', MESSAGE = 'user';
    END IF;

    INSERT INTO ratings (project_id, user_id, rating, review)
    VALUES (p_project_id, p_user_id, p_rating, NULLIF(p_review, ''))
    RETURNING * INTO v_rating;

    SELECT count(*), coalesce(sum(rating), 0) INTO v_count, v_total
    FROM ratings WHERE project_id = p_project_id;

    UPDATE projects
    SET rating_count = v_count,
        rating = CASE
            WHEN v_count = 0 THEN '0'
            ELSE to_char(round(v_total::numeric / v_count, 1), 'FM999999990.0')
        END
    WHERE id = p_project_id
    RETURNING * INTO v_project;

    RETURN json_build_object('rating', row_to_json(v_rating), 'project', row_to_json(v_project));
END;
$$;
"""

SET_FEATURED_PROJECT = """
CREATE OR REPLACE FUNCTION set_featured_project(p_project_id text) RETURNS json
LANGUAGE plpgsql
AS $$
DECLARE
    v_project projects%ROWTYPE;
BEGIN
    PERFORM pg_advisory_xact_lock(hashtext('set_featured_project'));
    UPDATE projects SET is_featured = false WHERE is_featured AND id <> p_project_id;
    UPDATE projects SET is_featured = true WHERE id = p_project_id RETURNING * INTO v_project;
    IF NOT FOUND THEN
        RAISE EXCEPTION USING ERRCODE = 'no_data_found', MESSAGE = 'project';
    END IF;
    RETURN row_to_json(v_project);
END;
$$;
"""


def upgrade() -> None:
    if op.get_bind().dialect.name != 'postgresql':
        return

    for table in ('users', 'projects', 'ratings'):
        op.execute(f"ALTER TABLE {table} ALTER COLUMN id SET DEFAULT gen_random_uuid()::text")
        op.execute(f"ALTER TABLE {table} ALTER COLUMN created_at SET DEFAULT now()")

    op.execute(SUBMIT_RATING)
    op.execute(SET_FEATURED_PROJECT)


def downgrade() -> None:
    if op.get_bind().dialect.name != 'postgresql':
        return

    op.execute("DROP FUNCTION IF EXISTS set_featured_project(text)")
    op.execute("DROP FUNCTION IF EXISTS submit_rating(text, text, integer, text)")

    for table in ('users', 'projects', 'ratings'):
        op.execute(f"ALTER TABLE {table} ALTER COLUMN id DROP DEFAULT")
        op.execute(f"ALTER TABLE {table} ALTER COLUMN created_at DROP DEFAULT")
