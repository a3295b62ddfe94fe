"""unique pair key on conversations

Revision ID: 0002_conversation_pair_key
Revises: 0001_contact_tables
Create Date: 2026-10-26 10:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0002_conversation_pair_key'
down_revision: Union[str, Sequence[str], None] = '0001_contact_tables'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table('contact_conversations') as batch_op:
        batch_op.add_column(sa.Column('pair_low_id', sa.String(64), nullable=True))
        batch_op.add_column(sa.Column('pair_high_id', sa.String(64), nullable=True))

    # Codepoint order, to match the application's sorted() of the two ids
    collate = ' COLLATE "C"' if op.get_context().dialect.name == 'postgresql' else ''
    lower = f"participant1_id{collate} < participant2_id{collate}"
    op.execute(
        f"""
        UPDATE contact_conversations
        SET pair_low_id = CASE WHEN {lower}
                               THEN participant1_id ELSE participant2_id END,
            pair_high_id = CASE WHEN {lower}
                                THEN participant2_id ELSE participant1_id END
        """
    )

    with op.batch_alter_table('contact_conversations') as batch_op:
        batch_op.alter_column('pair_low_id', existing_type=sa.String(64), nullable=False)
        batch_op.alter_column('pair_high_id', existing_type=sa.String(64), nullable=False)
        batch_op.create_unique_constraint('uq_conversation_pair', ['pair_low_id', 'pair_high_id'])


def downgrade() -> None:
    with op.batch_alter_table('contact_conversations') as batch_op:
        batch_op.drop_constraint('uq_conversation_pair', type_='unique')
        batch_op.drop_column('pair_high_id')
        batch_op.drop_column('pair_low_id')
