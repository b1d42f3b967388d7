"""Static catalog of hand-rolled implementation patterns.

Each rule names a domain, the files it applies to and the line regexes that
identify hand-rolled code in that domain. The catalog is built once at
import time into an immutable tuple and validated; it carries no advice on
what should replace the matched code.
"""

import re
from dataclasses import dataclass

# Fixed domain vocabulary; every rule's domain must be a member
DOMAINS: frozenset[str] = frozenset({
    # UX completeness and design system
    "ux-completeness",
    "ui-aesthetics",
    "design-system",
    "theming-dark-mode",
    "a11y-accessibility",
    "responsive-mobile-ux",
    "empty-loading-error-states",
    "forms-ux",
    "validation-feedback",
    "navigation-information-architecture",
    "notifications-inapp",
    "tables-data-grid-ux",
    "filters-sort-search-ux",
    "onboarding-guided-tour",
    # SEO, i18n and content
    "seo",
    "i18n",
    "localization-ux",
    "content-marketing",
    "landing-page-conversion",
    # Growth and data
    "growth-hacking",
    "analytics-tracking",
    "attribution-measurement",
    "ab-testing-experimentation",
    "product-led-growth",
    "retention-lifecycle-crm",
    "referrals-virality",
    # App and frontend architecture
    "agent-architecture",
    "frontend-architecture",
    "state-management",
    "data-fetching-caching",
    "error-handling-resilience",
    "realtime-collaboration",
    "file-upload-media",
    "search-discovery",
    # Backend and platform
    "api-design-contracts",
    "backend-architecture",
    "database-orm-migrations",
    "caching-rate-limit",
    "jobs-queue-scheduler",
    "webhooks-integrations",
    "feature-flags-config",
    "multi-tenancy-saas",
    # Security and compliance
    "auth-security",
    "permissions-rbac-ux",
    "security-hardening",
    "privacy-compliance",
    "fraud-abuse-prevention",
    # Observability and ops
    "observability",
    "logging-tracing-metrics",
    "error-monitoring",
    "alerting-incident-response",
    # Delivery, quality and devex
    "testing-strategy",
    "ci-cd-release",
    "devex-tooling",
    "documentation-sop",
    "code-quality-linting",
    "dependency-management",
    # Performance and cost
    "performance-web-vitals",
    "backend-performance",
    "cost-optimization",
    # AI engineering
    "ai-model-serving",
    "ai-evaluation-observability",
    "rag-vector-search",
    # Business domains
    "cross-border-ecommerce",
    "payments-billing",
    "marketplace-platform",
})

_JS = ("**/*.ts", "**/*.tsx", "**/*.js", "**/*.jsx")
_SCRIPT = ("**/*.ts", "**/*.js", "**/*.py")


class CatalogError(ValueError):
    """Raised at import time when the catalog violates its invariants."""


@dataclass(frozen=True)
class PatternDefinition:
    """A declarative rule identifying hand-rolled code.

    Attributes:
        id: Globally unique rule id (e.g. "i18n-manual-pluralization").
        domain: Member of DOMAINS.
        description: What the rule detects.
        file_patterns: Globs of the files the rule applies to.
        code_patterns: Compiled line regexes.
        confidence_base: Confidence reported with every match (0-1).
    """

    id: str
    domain: str
    description: str
    file_patterns: tuple[str, ...]
    code_patterns: tuple[re.Pattern[str], ...]
    confidence_base: float


def _rule(
    id: str,
    domain: str,
    description: str,
    file_patterns: tuple[str, ...],
    code_patterns: tuple[str, ...],
    confidence_base: float,
    flags: tuple[int, ...] | None = None,
) -> PatternDefinition:
    flags = flags or (0,) * len(code_patterns)
    return PatternDefinition(
        id=id,
        domain=domain,
        description=description,
        file_patterns=file_patterns,
        code_patterns=tuple(re.compile(p, f) for p, f in zip(code_patterns, flags, strict=True)),
        confidence_base=confidence_base,
    )


_I = re.IGNORECASE

PATTERN_CATALOG: tuple[PatternDefinition, ...] = (
    # i18n
    _rule(
        "i18n-manual-pluralization",
        "i18n",
        "Hand-rolled pluralization logic (if/else or ternary on count)",
        _JS,
        (
            r"count\s*[=!]==?\s*1\s*\?\s*['\"`].*['\"`]\s*:\s*['\"`].*['\"`]",
            r"\.length\s*[=!]==?\s*1\s*\?\s*['\"`].*['\"`]\s*:\s*['\"`].*['\"`]",
        ),
        0.7,
    ),
    _rule(
        "i18n-manual-locale-detection",
        "i18n",
        "Manual navigator.language or Accept-Language header parsing",
        _JS,
        (
            r"navigator\s*\.\s*language",
            r"accept-language",
            r"toLocaleDateString\s*\(",
        ),
        0.65,
        (0, _I, 0),
    ),
    # seo
    _rule(
        "seo-manual-meta-tags",
        "seo",
        "Hand-rolled <meta> tag injection via DOM manipulation",
        _JS,
        (
            r"document\s*\.\s*createElement\s*\(\s*['\"`]meta['\"`]\s*\)",
            r"document\s*\.\s*head\s*\.\s*appendChild",
            r"document\s*\.\s*querySelector\s*\(\s*['\"`]meta\[",
        ),
        0.75,
    ),
    _rule(
        "seo-manual-sitemap",
        "seo",
        "Hand-rolled XML sitemap generation",
        ("**/*.ts", "**/*.js", "**/*.xml"),
        (
            r"<\?xml\s+version",
            r"<urlset\s+xmlns",
            r"writeFileSync\s*\(.*sitemap",
        ),
        0.8,
        (0, 0, _I),
    ),
    # growth-hacking
    _rule(
        "growth-manual-ab-test",
        "growth-hacking",
        "Hand-rolled A/B testing with Math.random() or cookie-based splits",
        _JS,
        (
            r"Math\s*\.\s*random\s*\(\s*\)\s*[<>]=?\s*0?\.\s*5",
            r"variant\s*=\s*['\"`][AB]['\"`]",
            r"experiment\s*[=:]\s*.*random",
        ),
        0.7,
        (0, _I, _I),
    ),
    _rule(
        "growth-manual-feature-flags",
        "growth-hacking",
        "Hand-rolled feature flag checks via environment variables or config objects",
        _JS,
        (
            r"process\s*\.\s*env\s*\.\s*FEATURE_",
            r"featureFlags?\s*\[",
            r"isFeatureEnabled\s*\(",
        ),
        0.6,
    ),
    # ai-model-serving
    _rule(
        "ai-manual-prompt-template",
        "ai-model-serving",
        "Hand-rolled prompt template string interpolation",
        _JS + ("**/*.py",),
        (
            r"`[^`]*\$\{.*\}[^`]*`\s*.*(?:prompt|system|user|assistant)",
            r"f['\"].*\{.*\}.*['\"].*(?:prompt|model|completion)",
            r"\.replace\s*\(\s*['\"`]\{.*\}['\"`]",
        ),
        0.65,
        (_I, _I, 0),
    ),
    _rule(
        "ai-manual-inference-http",
        "ai-model-serving",
        "Hand-rolled HTTP calls to model inference endpoints",
        _SCRIPT,
        (
            r"fetch\s*\(\s*['\"`].*(?:openai|anthropic|huggingface|inference)",
            r"axios\s*\.\s*post\s*\(\s*['\"`].*(?:completions|chat|generate)",
            r"requests\s*\.\s*post\s*\(\s*['\"`].*(?:v1/|api/)",
        ),
        0.7,
        (_I, _I, _I),
    ),
    # agent-architecture
    _rule(
        "agent-manual-tool-dispatch",
        "agent-architecture",
        "Hand-rolled tool dispatch with switch/case or if/else chains",
        _SCRIPT,
        (
            r"switch\s*\(\s*tool(?:Name|_name|Id)\s*\)",
            r"if\s*\(\s*tool(?:Name|_name)\s*===?\s*['\"`]",
            r"tool_map\s*\[",
        ),
        0.7,
        (_I, _I, _I),
    ),
    _rule(
        "agent-manual-context-window",
        "agent-architecture",
        "Hand-rolled context window management (token counting, truncation)",
        _SCRIPT,
        (
            r"token[_s]?\s*(?:count|length|limit)",
            r"truncat(?:e|ion)\s*.*(?:context|message|prompt)",
            r"maxTokens?\s*[=:]",
        ),
        0.6,
        (_I, _I, _I),
    ),
    # content-marketing
    _rule(
        "content-manual-markdown-parsing",
        "content-marketing",
        "Hand-rolled markdown parsing with regex or string manipulation",
        ("**/*.ts", "**/*.js", "**/*.tsx", "**/*.jsx"),
        (
            r"\.replace\s*\(\s*/\s*#",
            r"\.replace\s*\(\s*/\s*\\\*\\\*",
            r"\.split\s*\(\s*['\"`]\\n['\"`]\s*\)\s*\.\s*map",
        ),
        0.65,
    ),
    _rule(
        "content-manual-mdx-processing",
        "content-marketing",
        "Hand-rolled MDX/markdown file processing pipeline",
        ("**/*.ts", "**/*.js"),
        (
            r"readFileSync\s*\(.*\.mdx?\b",
            r"glob\s*\(.*\.mdx?\b",
            r"frontmatter|gray-matter",
        ),
        0.6,
        (_I, _I, _I),
    ),
    # cross-border-ecommerce
    _rule(
        "ecommerce-manual-payment-integration",
        "cross-border-ecommerce",
        "Hand-rolled payment gateway HTTP integration",
        _SCRIPT,
        (
            r"fetch\s*\(\s*['\"`].*(?:stripe|paypal|checkout).*['\"`]",
            r"payment[_-]?intent",
            r"charge\s*\.\s*create",
        ),
        0.75,
        (_I, _I, _I),
    ),
    _rule(
        "ecommerce-manual-tax-calculation",
        "cross-border-ecommerce",
        "Hand-rolled tax/VAT calculation logic",
        _SCRIPT,
        (
            r"tax[_-]?rate\s*[=:]\s*0?\.\d+",
            r"vat\s*[=:*]",
            r"calculateTax\s*\(",
        ),
        0.65,
        (_I, _I, _I),
    ),
    # observability
    _rule(
        "observability-manual-logging",
        "observability",
        "Hand-rolled logging with console.log/console.error in production code",
        ("**/*.ts", "**/*.js", "**/*.tsx", "**/*.jsx"),
        (r"console\s*\.\s*(?:log|error|warn|info)\s*\(",),
        0.55,
    ),
    _rule(
        "observability-manual-error-tracking",
        "observability",
        "Hand-rolled error tracking with try/catch and HTTP reporting",
        ("**/*.ts", "**/*.js", "**/*.tsx", "**/*.jsx"),
        (
            r"catch\s*\(\s*\w+\s*\)\s*\{[^}]*fetch\s*\(",
            r"window\s*\.\s*onerror",
            r"process\s*\.\s*on\s*\(\s*['\"`]uncaughtException['\"`]",
        ),
        0.7,
    ),
    # auth-security
    _rule(
        "auth-manual-jwt-handling",
        "auth-security",
        "Hand-rolled JWT token creation/verification",
        _SCRIPT,
        (
            r"atob\s*\(\s*.*split\s*\(\s*['\"`]\.['\"`]\s*\)",
            r"Buffer\s*\.\s*from\s*\(.*['\"`]base64['\"`]\s*\)",
            r"jwt\s*\.\s*sign\s*\(",
            r"createHmac\s*\(",
        ),
        0.75,
        (0, 0, _I, 0),
    ),
    _rule(
        "auth-manual-rate-limiting",
        "auth-security",
        "Hand-rolled rate limiting with in-memory counters or timestamps",
        ("**/*.ts", "**/*.js"),
        (
            r"requestCount\s*[+]=\s*1",
            r"rateLimi(?:t|ter)",
            r"new\s+Map\s*\(\s*\).*(?:timestamp|count|window)",
        ),
        0.65,
        (_I, _I, _I),
    ),
    # ux-completeness
    _rule(
        "ux-manual-form-validation",
        "ux-completeness",
        "Hand-rolled form validation with manual state tracking",
        ("**/*.tsx", "**/*.jsx", "**/*.ts", "**/*.js"),
        (
            r"setError\s*\(\s*['\"`]",
            r"errors\s*\[\s*['\"`]\w+['\"`]\s*\]",
            r"validate\w*\s*=\s*\(\s*\)\s*=>",
        ),
        0.7,
    ),
    _rule(
        "ux-manual-loading-states",
        "ux-completeness",
        "Hand-rolled loading state management without skeleton/spinner library",
        ("**/*.tsx", "**/*.jsx"),
        (
            r"isLoading\s*\?\s*.*(?:Loading|Spinner|\.\.\.)",
            r"useState\s*<\s*boolean\s*>\s*\(\s*(?:true|false)\s*\).*loading",
        ),
        0.55,
        (_I, _I),
    ),
)


def _validate_catalog(catalog: tuple[PatternDefinition, ...]) -> None:
    seen: set[str] = set()
    for rule in catalog:
        if rule.id in seen:
            raise CatalogError(f"Duplicate pattern id: {rule.id}")
        seen.add(rule.id)
        if rule.domain not in DOMAINS:
            raise CatalogError(f"Pattern {rule.id} has unknown domain {rule.domain!r}")
        if not 0.0 <= rule.confidence_base <= 1.0:
            raise CatalogError(f"Pattern {rule.id} confidence out of range: {rule.confidence_base}")
        if not rule.file_patterns or not rule.code_patterns:
            raise CatalogError(f"Pattern {rule.id} needs file and code patterns")


_validate_catalog(PATTERN_CATALOG)

_PATTERNS_BY_ID: dict[str, PatternDefinition] = {rule.id: rule for rule in PATTERN_CATALOG}


def get_pattern_catalog() -> tuple[PatternDefinition, ...]:
    """Return the full, immutable pattern catalog."""
    return PATTERN_CATALOG


def get_patterns_for_domain(domain: str) -> list[PatternDefinition]:
    """Return the catalog rules belonging to one domain."""
    return [rule for rule in PATTERN_CATALOG if rule.domain == domain]


def get_pattern(pattern_id: str) -> PatternDefinition:
    """Look up a rule by id.

    Raises:
        KeyError: If no rule has this id.
    """
    return _PATTERNS_BY_ID[pattern_id]
