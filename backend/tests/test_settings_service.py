import pytest
from sqlalchemy.exc import OperationalError

from donation_admin.modules.settings.defaults import DEFAULT_SETTINGS, get_default_settings
from donation_admin.modules.settings.repository import SettingRepository
from donation_admin.modules.settings.service import SettingService
from donation_admin.shared.exceptions import BadRequestException, NotFoundException
from donation_admin.shared.utils import decrypt_dict


class FailingSettingRepository(SettingRepository):
    """Repositorio que falha ao gravar categorias especificas."""

    def __init__(self, db, failing: set[str]) -> None:
        super().__init__(db)
        self._failing = failing

    def upsert(self, category, encrypted_values, updated_by=None):
        if category in self._failing:
            raise OperationalError('UPDATE settings', {}, Exception('disk full'))
        return super().upsert(category, encrypted_values, updated_by)


@pytest.fixture
def repository(db_session):
    return SettingRepository(db_session)


@pytest.fixture
def service(repository, activity_logger):
    return SettingService(repository, activity_logger)


def test_upsert_replaces_whole_category(service):
    """Segunda escrita descarta chaves ausentes (sem merge)."""
    service.upsert('branding', {'logo_url': '/x.png'}, None)
    service.upsert('branding', {'primary_color': '#000'}, None)

    assert service.get_by_category('branding') == {'primary_color': '#000'}


def test_upsert_creates_single_row_per_category(service, repository):
    service.upsert('custom', {'a': 1}, None)
    service.upsert('custom', {'b': 2}, None)

    rows = [s for s in repository.get_all() if s.category == 'custom']
    assert len(rows) == 1
    assert decrypt_dict(rows[0].encrypted_values) == {'b': 2}


def test_values_are_encrypted_at_rest(service, repository):
    service.upsert('payment', {'razorpay_key_secret': 'sk_live_123'}, None)

    stored = repository.get_by_category('payment')
    assert 'sk_live_123' not in stored.encrypted_values
    assert decrypt_dict(stored.encrypted_values) == {'razorpay_key_secret': 'sk_live_123'}


def test_upsert_records_activity_and_actor(service, activity_logger, admin_user, repository):
    service.upsert('email', {'smtp_host': 'smtp.doacoes.org'}, admin_user.id)

    assert activity_logger.actions == ['admin_update_settings']
    entry = activity_logger.records[0]
    assert entry['actor_id'] == admin_user.id
    assert entry['metadata'] == {'category': 'email', 'settings_keys': ['smtp_host']}
    assert repository.get_by_category('email').updated_by == admin_user.id


def test_upsert_rejects_non_dict_values(service, activity_logger):
    with pytest.raises(BadRequestException):
        service.upsert('branding', ['not', 'a', 'dict'], None)
    assert activity_logger.records == []


def test_get_by_category_falls_back_to_defaults(service):
    assert service.get_by_category('security') == dict(DEFAULT_SETTINGS['security'])


def test_get_by_category_unknown_raises_not_found(service):
    with pytest.raises(NotFoundException):
        service.get_by_category('does-not-exist')


def test_get_all_merges_stored_and_default_categories(service):
    service.upsert('general', {'site_name': 'Doe Mais'}, None)
    service.upsert('custom', {'flag': True}, None)

    result = service.get_all()

    assert result['general'] == {'site_name': 'Doe Mais'}
    assert result['custom'] == {'flag': True}
    assert result['features'] == dict(DEFAULT_SETTINGS['features'])
    assert set(DEFAULT_SETTINGS) <= set(result)


def test_reset_to_default_overwrites_category(service, activity_logger):
    service.upsert('branding', {'primary_color': '#000'}, None)

    values = service.reset_to_default('branding', None)

    assert values == dict(DEFAULT_SETTINGS['branding'])
    assert service.get_by_category('branding') == dict(DEFAULT_SETTINGS['branding'])
    assert activity_logger.actions[-1] == 'admin_reset_settings'


def test_reset_non_default_category_raises_not_found(service):
    service.upsert('custom', {'a': 1}, None)

    with pytest.raises(NotFoundException):
        service.reset_to_default('custom', None)
    assert service.get_by_category('custom') == {'a': 1}


def test_get_defaults_returns_independent_copy(service):
    defaults = service.get_defaults()
    defaults['branding']['primary_color'] = '#fff'
    defaults.pop('email')

    fresh = get_default_settings()
    assert fresh['branding']['primary_color'] == '#007bff'
    assert 'email' in fresh


def test_initialize_defaults_creates_missing_without_overwriting(service, activity_logger):
    service.upsert('branding', {'primary_color': '#123456'}, None)

    created = service.initialize_defaults()

    assert 'branding' not in created
    assert set(created) == set(DEFAULT_SETTINGS) - {'branding'}
    assert service.get_by_category('branding') == {'primary_color': '#123456'}
    assert activity_logger.actions[-1] == 'settings_initialized'

    assert service.initialize_defaults() == []


def test_bulk_upsert_writes_every_category(service, activity_logger):
    result = service.bulk_upsert(
        {'branding': {'primary_color': '#111'}, 'social': {'facebook_url': 'https://fb.com/x'}},
        None,
    )

    assert result.success
    assert result.updated_categories == ['branding', 'social']
    assert service.get_by_category('social') == {'facebook_url': 'https://fb.com/x'}
    assert activity_logger.actions == ['admin_bulk_update_settings']


def test_bulk_upsert_validates_whole_payload_before_writing(service):
    with pytest.raises(BadRequestException):
        service.bulk_upsert({'branding': {'primary_color': '#111'}, 'legal': 'invalid'}, None)

    assert service.get_by_category('branding') == dict(DEFAULT_SETTINGS['branding'])


def test_bulk_upsert_reports_failed_categories(db_session, activity_logger):
    service = SettingService(
        FailingSettingRepository(db_session, failing={'payment'}),
        activity_logger,
    )

    result = service.bulk_upsert(
        {'branding': {'primary_color': '#222'}, 'payment': {'currency': 'BRL'}},
        None,
    )

    assert not result.success
    assert result.updated_categories == ['branding']
    assert 'disk full' in result.failed_categories['payment']
    assert service.get_by_category('branding') == {'primary_color': '#222'}


def test_public_settings_expose_safe_subset(service):
    service.upsert('branding', {'primary_color': '#000'}, None)
    service.upsert('social', {'twitter_url': 'https://x.com/doe', 'google_client_id': 'abc'}, None)
    service.upsert('environment', {'jwt_secret': 'super-secret'}, None)

    public = service.get_public_settings()

    assert set(public) == {'theme', 'branding', 'features', 'contact', 'social'}
    # Chaves ausentes na categoria gravada caem para o padrao
    assert public['theme'] == {'primary_color': '#000', 'secondary_color': '#6c757d'}
    assert public['branding']['site_name'] == 'Donation Platform'
    assert public['features']['enable_campaigns'] is True
    assert public['features']['registration_enabled'] is True
    assert public['contact']['contact_email'] == 'support@donationplatform.com'
    assert public['social']['twitter_url'] == 'https://x.com/doe'

    flattened = {key for group in public.values() for key in group}
    assert 'google_client_id' not in flattened
    assert 'jwt_secret' not in flattened
    assert 'razorpay_key_secret' not in flattened
    assert 'super-secret' not in str(public)


def test_upsert_keeps_string_values_exactly(service):
    values = {
        'tagline': '  Doe agora  ',
        'footer': 'linha 1\nlinha 2\n',
        'custom_css': '\tbody { margin: 0; }\n',
    }

    service.upsert('branding', values, None)

    assert service.get_by_category('branding') == values


def test_concurrent_first_insert_of_category_overwrites(db_session, activity_logger):
    """Categoria criada por outra requisicao entre a leitura e a insercao."""

    class StaleReadSettingRepository(SettingRepository):
        """Primeira leitura nao enxerga a categoria criada concorrentemente."""

        def __init__(self, db):
            super().__init__(db)
            self.reads = 0

        def get_by_category(self, category, include_inactive=False):
            self.reads += 1
            if self.reads == 1:
                return None
            return super().get_by_category(category, include_inactive)

    SettingService(SettingRepository(db_session), activity_logger).upsert(
        'email', {'smtp_host': 'primeiro.doacoes.org'}, None,
    )
    racing = SettingService(StaleReadSettingRepository(db_session), activity_logger)

    racing.upsert('email', {'smtp_host': 'segundo.doacoes.org'}, None)

    rows = [s for s in SettingRepository(db_session).get_all() if s.category == 'email']
    assert len(rows) == 1
    assert decrypt_dict(rows[0].encrypted_values) == {'smtp_host': 'segundo.doacoes.org'}


def test_bulk_upsert_all_failed_still_describes_attempt(db_session, activity_logger):
    service = SettingService(
        FailingSettingRepository(db_session, failing={'payment', 'email'}),
        activity_logger,
    )

    result = service.bulk_upsert({'payment': {'currency': 'BRL'}, 'email': {'smtp_port': 25}}, None)

    assert result.updated_categories == []
    entry = activity_logger.records[-1]
    assert entry['action'] == 'admin_bulk_update_settings'
    assert entry['description'].endswith('payment, email')
    assert entry['metadata']['failed_categories'] == ['email', 'payment']
