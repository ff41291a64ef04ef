"""create crime tables

Revision ID: 5c1e7a9d2b34
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""
from alembic import op
import sqlalchemy as sa
import geoalchemy2


# revision identifiers, used by Alembic.
revision = '5c1e7a9d2b34'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS postgis')

    op.create_table(
        'areas',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=150), nullable=True),
        sa.Column('metadata_source', sa.Text(), nullable=True),
        sa.Column('srs_id', sa.String(length=50), nullable=True),
        sa.Column('province', sa.String(length=100), nullable=True),
        sa.Column('regency', sa.String(length=100), nullable=True),
        sa.Column('district', sa.String(length=100), nullable=True),
        sa.Column('village', sa.String(length=100), nullable=True),
        sa.Column('uupp', sa.String(length=100), nullable=True),
        sa.Column('population_total', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('population_male', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('population_female', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('population_density', sa.Float(), nullable=False, server_default='0'),
        sa.Column('land_area', sa.Float(), nullable=False, server_default='0'),
        sa.Column('geom', geoalchemy2.types.Geometry(geometry_type='GEOMETRY', srid=4326, spatial_index=False), nullable=True),
        sa.Column('crime_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('crime_rate', sa.String(length=50), nullable=True),
        sa.Column('color', sa.String(length=16), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_areas')),
    )
    op.create_index(op.f('ix_areas_name'), 'areas', ['name'])
    op.create_index('idx_areas_geom', 'areas', ['geom'], postgresql_using='gist')

    op.create_table(
        'types',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_types')),
        sa.UniqueConstraint('name', name=op.f('uq_types_name')),
    )

    op.create_table(
        'crime_incidents',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('incident_code', sa.String(length=50), nullable=False),
        sa.Column('area_id', sa.Integer(), nullable=False),
        sa.Column('type_id', sa.Integer(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('location', geoalchemy2.types.Geometry(geometry_type='POINT', srid=4326, spatial_index=False), nullable=True),
        sa.Column('incident_date', sa.Date(), nullable=False),
        sa.Column('incident_time', sa.Time(), nullable=True),
        sa.Column('severity_level', sa.String(length=16), nullable=False, server_default='MEDIUM'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('reported_at', sa.DateTime(), nullable=True, server_default=sa.text('now()')),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint(
            "severity_level IN ('LOW', 'MEDIUM', 'HIGH', 'CRITICAL')",
            name=op.f('ck_crime_incidents_severity_level'),
        ),
        sa.ForeignKeyConstraint(['area_id'], ['areas.id'], name=op.f('fk_crime_incidents_area_id_areas')),
        sa.ForeignKeyConstraint(['type_id'], ['types.id'], name=op.f('fk_crime_incidents_type_id_types')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_crime_incidents')),
        sa.UniqueConstraint('incident_code', name=op.f('uq_crime_incidents_incident_code')),
    )
    op.create_index(op.f('ix_crime_incidents_area_id'), 'crime_incidents', ['area_id'])
    op.create_index(op.f('ix_crime_incidents_type_id'), 'crime_incidents', ['type_id'])
    op.create_index(op.f('ix_crime_incidents_incident_date'), 'crime_incidents', ['incident_date'])
    op.create_index('idx_crime_incidents_location', 'crime_incidents', ['location'], postgresql_using='gist')


def downgrade() -> None:
    op.drop_index('idx_crime_incidents_location', table_name='crime_incidents')
    op.drop_index(op.f('ix_crime_incidents_incident_date'), table_name='crime_incidents')
    op.drop_index(op.f('ix_crime_incidents_type_id'), table_name='crime_incidents')
    op.drop_index(op.f('ix_crime_incidents_area_id'), table_name='crime_incidents')
    op.drop_table('crime_incidents')
    op.drop_table('types')
    op.drop_index('idx_areas_geom', table_name='areas')
    op.drop_index(op.f('ix_areas_name'), table_name='areas')
    op.drop_table('areas')
