# config/security.py
"""
Static security configuration loaded into Flask's app.config
"""


class SecurityConfig:
    """Security configuration settings"""

    # JSON bodies above this size are rejected with 413
    MAX_CONTENT_LENGTH = 200 * 1024

    # Rate limiting (storage URI comes from AppConfig)
    RATELIMIT_STRATEGY = 'moving-window'
    RATELIMIT_HEADERS_ENABLED = True

    # Content Security Policy
    CSP_POLICY = {
        'default-src': "'self'",
        'base-uri': "'self'",
        'font-src': "'self' https: data:",
        'form-action': "'self'",
        'frame-ancestors': "'self'",
        'img-src': "'self' data:",
        'object-src': "'none'",
        'script-src': "'self'",
        'script-src-attr': "'none'",
        'style-src': "'self' https: 'unsafe-inline'",
        'upgrade-insecure-requests': '',
    }

    # Security headers
    SECURITY_HEADERS = {
        'Cross-Origin-Opener-Policy': 'same-origin',
        'Cross-Origin-Resource-Policy': 'same-origin',
        'Origin-Agent-Cluster': '?1',
        'Referrer-Policy': 'no-referrer',
        'Strict-Transport-Security': 'max-age=15552000; includeSubDomains',
        'X-Content-Type-Options': 'nosniff',
        'X-DNS-Prefetch-Control': 'off',
        'X-Download-Options': 'noopen',
        'X-Frame-Options': 'SAMEORIGIN',
        'X-Permitted-Cross-Domain-Policies': 'none',
        'X-XSS-Protection': '0',
    }


def build_csp(policy: dict) -> str:
    """Render a CSP directive mapping as a header value"""
    return ';'.join(f"{name} {value}".strip() for name, value in policy.items())
