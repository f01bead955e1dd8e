from sqlalchemy.exc import OperationalError

from donation_admin.modules.audit.repository import AuditLogRepository
from donation_admin.modules.audit.service import ActivityLogger


class BrokenAuditRepository(AuditLogRepository):
    def create(self, data):
        raise OperationalError('INSERT INTO audit_log', {}, Exception('connection lost'))


def test_activity_is_persisted(db_session, admin_user):
    repository = AuditLogRepository(db_session)

    ActivityLogger(repository).record(
        admin_user.id,
        'admin_update_settings',
        'Admin atualizou configuracoes de branding',
        {'category': 'branding'},
        resource_type='settings',
    )

    logs, total = repository.list(action='admin_update_settings')
    assert total == 1
    assert logs[0].user_id == admin_user.id
    assert logs[0].details == {'category': 'branding'}


def test_activity_failure_is_logged_not_raised(db_session, caplog):
    logger = ActivityLogger(BrokenAuditRepository(db_session))

    with caplog.at_level('WARNING', logger='donation_admin.modules.audit.service'):
        logger.record(None, 'share_link_created', 'Link gerado')

    assert any('share_link_created' in record.getMessage() for record in caplog.records)


def test_audit_logs_require_admin(client, donor_headers):
    response = client.get('/api/audit-logs', headers=donor_headers)

    assert response.status_code == 403
