"""
Tabela embutida de configuracoes padrao da plataforma.

Usada na inicializacao (categorias ainda inexistentes sao criadas com estes
valores) e na operacao de reset de uma categoria. A tabela e imutavel:
get_default_settings() sempre devolve uma copia nova e independente.
"""

from collections.abc import Mapping
from types import MappingProxyType

SettingValue = str | int | float | bool | None

DEFAULT_SETTINGS: Mapping[str, Mapping[str, SettingValue]] = MappingProxyType({
    'email': MappingProxyType({
        'smtp_host': 'smtp.gmail.com',
        'smtp_port': 587,
        'smtp_secure': False,
        'from_email': 'noreply@example.com',
        'enable_notifications': True,
    }),
    'security': MappingProxyType({
        'password_min_length': 8,
        'password_require_uppercase': True,
        'password_require_lowercase': True,
        'password_require_numbers': True,
        'password_require_symbols': False,
        'session_timeout': 3600,
        'max_login_attempts': 5,
    }),
    'general': MappingProxyType({
        'site_name': 'Donation Platform',
        'site_description': 'A platform for charitable donations',
        'maintenance_mode': False,
        'registration_enabled': True,
    }),
    'branding': MappingProxyType({
        'logo_url': '',
        'favicon_url': '',
        'primary_color': '#007bff',
        'secondary_color': '#6c757d',
    }),
    'payment': MappingProxyType({
        'gateway': 'razorpay',
        'test_mode': True,
        'currency': 'INR',
        'razorpay_key_id': '',
        'razorpay_key_secret': '',
        'minimum_donation': 1,
        'maximum_donation': 100000,
    }),
    'notifications': MappingProxyType({
        'email_notifications': True,
        'push_notifications': False,
        'sms_notifications': False,
        'admin_notifications': True,
        'user_notifications': True,
        'campaign_notifications': True,
    }),
    'rate_limiting': MappingProxyType({
        'enabled': True,
        'window_minutes': 15,
        'max_requests': 100,
        'auth_attempts_limit': 5,
        'auth_window_minutes': 15,
        'upload_limit_mb': 50,
        'api_rate_limit': 1000,
    }),
    'legal': MappingProxyType({
        'company_name': 'Donation Platform Pvt Ltd',
        'copyright_text': '© 2024 Donation Platform. All rights reserved.',
        'terms_url': '/terms',
        'privacy_url': '/privacy',
        'contact_email': 'support@donationplatform.com',
        'contact_phone': '+91-9999999999',
        'contact_address': '123 Main Street, City, State - 123456',
        'registration_number': 'CIN123456789',
        'gst_number': '',
        'pan_number': '',
    }),
    'social': MappingProxyType({
        'facebook_url': '',
        'twitter_url': '',
        'instagram_url': '',
        'linkedin_url': '',
        'youtube_url': '',
        'enable_social_login': False,
        'google_client_id': '',
        'facebook_app_id': '',
    }),
    'environment': MappingProxyType({
        'node_env': 'development',
        'port': 5000,
        'frontend_url': 'http://localhost:5173',
        'backend_url': 'http://localhost:5000',
        'database_url': '',
        'jwt_secret': '',
        'jwt_expires_in': '7d',
        'cloudinary_cloud_name': '',
        'cloudinary_api_key': '',
        'cloudinary_api_secret': '',
    }),
    'features': MappingProxyType({
        'enable_campaigns': True,
        'enable_donations': True,
        'enable_comments': True,
        'enable_sharing': True,
        'enable_analytics': True,
        'enable_reports': True,
        'enable_notifications': True,
        'enable_file_uploads': True,
        'max_campaign_images': 10,
        'max_file_size_mb': 50,
    }),
})


def get_default_settings() -> dict[str, dict[str, SettingValue]]:
    """Retorna uma copia mutavel da tabela de configuracoes padrao."""
    return {category: dict(values) for category, values in DEFAULT_SETTINGS.items()}


def is_default_category(category: str) -> bool:
    """Indica se a categoria possui entrada na tabela de padroes."""
    return category in DEFAULT_SETTINGS
