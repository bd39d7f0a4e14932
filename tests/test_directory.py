"""
Tests for organization resolution.
"""

import pytest
from django.core.exceptions import ImproperlyConfigured

from storeman.adapters import get_organization_directory, resolve_organization
from storeman.adapters.orm import OrmOrganizationDirectory
from storeman.exceptions import ConflictError, NotFoundError
from storeman.models import Organization
from storeman.protocols import OrganizationDirectory, OrganizationInfo


pytestmark = pytest.mark.django_db


class StaticDirectory:
    """Directory that knows one tenant the local table has never seen."""

    def resolve(self, slug):
        if slug != 'remote':
            raise NotFoundError('ORGANIZATION_NOT_FOUND', slug=slug)
        return OrganizationInfo(id=4242, slug='remote', name='Remote Tenant')


class TestResolveOrganization:

    def test_default_adapter(self, org):
        directory = get_organization_directory()

        assert isinstance(directory, OrmOrganizationDirectory)
        assert isinstance(directory, OrganizationDirectory)
        assert resolve_organization('acme') == org

    @pytest.mark.parametrize('slug', ['', None, 'missing'])
    def test_unknown(self, org, slug):
        with pytest.raises(NotFoundError) as exc:
            resolve_organization(slug)

        assert exc.value.code == 'ORGANIZATION_NOT_FOUND'

    def test_inactive(self, db):
        Organization.objects.create(slug='old', name='Old', is_active=False)

        with pytest.raises(NotFoundError):
            resolve_organization('old')

    def test_custom_directory_creates_local_row(self, db, settings):
        settings.STOREMAN = {'ORGANIZATION_DIRECTORY': f'{__name__}.StaticDirectory'}

        org = resolve_organization('remote')

        assert org.pk == 4242
        assert Organization.objects.get(pk=4242).slug == 'remote'

    def test_custom_directory_matches_local_slug(self, db, settings):
        """A local row with the same slug is reused whatever its id."""
        settings.STOREMAN = {'ORGANIZATION_DIRECTORY': f'{__name__}.StaticDirectory'}
        local = Organization.objects.create(slug='remote', name='Remote (local)')
        assert local.pk != 4242

        org = resolve_organization('remote')

        assert org == local
        assert not Organization.objects.filter(pk=4242).exists()

    def test_custom_directory_id_taken(self, db, settings):
        settings.STOREMAN = {'ORGANIZATION_DIRECTORY': f'{__name__}.StaticDirectory'}
        Organization.objects.create(pk=4242, slug='taken', name='Taken')

        with pytest.raises(ConflictError) as exc:
            resolve_organization('remote')

        assert exc.value.code == 'ORGANIZATION_ID_TAKEN'
        assert exc.value.http_status == 409
        assert Organization.objects.get(pk=4242).slug == 'taken'
        assert not Organization.objects.filter(slug='remote').exists()

    def test_empty_path(self, db, settings):
        settings.STOREMAN = {'ORGANIZATION_DIRECTORY': ''}

        with pytest.raises(ImproperlyConfigured):
            get_organization_directory()

    def test_bad_path(self, db, settings):
        settings.STOREMAN = {'ORGANIZATION_DIRECTORY': 'storeman.adapters.nowhere.Directory'}

        with pytest.raises(ImproperlyConfigured):
            get_organization_directory()
