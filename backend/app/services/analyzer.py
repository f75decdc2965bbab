"""
Keyword based requirements classifier.

Everything here is a pure function of the lowercased prompt: a decision list
picks the site type, independent trigger lists collect features, and the
remaining fields come from rule tables keyed on (type, features).
"""

from typing import Callable, Optional

from app.models.models import (
    ApiPricing, ApiRequirement, AuthRequirement, DatabaseRequirement, HostingRequirement,
    Integration, IntegrationPricing, PaymentRequirement, Requirements, StorageRequirement,
    WebsiteType,
)

Rule = Callable[[WebsiteType, list[str]], bool]

# First match wins
TYPE_RULES: list[tuple[WebsiteType, tuple[str, ...]]] = [
    (WebsiteType.ECOMMERCE, ("shop", "store", "sell")),
    (WebsiteType.SOCIAL_MEDIA, ("social", "community", "connect")),
    (WebsiteType.BLOG, ("blog", "content", "articles")),
    (WebsiteType.PORTFOLIO, ("portfolio", "showcase")),
    (WebsiteType.DASHBOARD, ("dashboard", "admin", "analytics")),
    (WebsiteType.WEB3, ("web3", "blockchain", "crypto")),
    (WebsiteType.MARKETPLACE, ("marketplace", "buy and sell")),
    (WebsiteType.SAAS, ("saas", "subscription")),
]

FEATURE_TRIGGERS: dict[str, tuple[str, ...]] = {
    # auth
    "authentication": ("login", "auth"),
    "social-auth": ("oauth", "social login"),
    "web3-auth": ("web3", "wallet"),
    # data
    "database": ("database", "store data"),
    "real-time": ("real-time", "live"),
    "search": ("search",),
    # content
    "file-upload": ("upload", "file"),
    "image-handling": ("image", "photo"),
    "video-handling": ("video",),
    # payments
    "payments": ("payment", "subscription"),
    "crypto-payments": ("crypto", "token"),
    # communication
    "email": ("email", "newsletter"),
    "messaging": ("chat", "message"),
    "notifications": ("notification",),
    # analytics
    "analytics": ("analytics", "track"),
    "dashboard": ("dashboard",),
}

INTEGRATIONS: dict[str, Integration] = {
    "analytics": Integration(
        name="Google Analytics",
        purpose="Track user behavior and website performance",
        setup_steps=[
            "Create Google Analytics account",
            "Get measurement ID",
            "Add tracking code to website",
        ],
        required_env_vars=["NEXT_PUBLIC_GA_MEASUREMENT_ID"],
        pricing=IntegrationPricing(free=True),
    ),
    "email": Integration(
        name="SendGrid",
        purpose="Send transactional and marketing emails",
        setup_steps=[
            "Create SendGrid account",
            "Generate API key",
            "Set up sender authentication",
        ],
        required_env_vars=["SENDGRID_API_KEY"],
        pricing=IntegrationPricing(
            free=True, starting_price="$14.95/month", pricing_url="https://sendgrid.com/pricing"
        ),
    ),
}

APIS: dict[str, ApiRequirement] = {
    "search": ApiRequirement(
        name="Algolia",
        purpose="Powerful search functionality",
        provider="Algolia",
        api_key_instructions="Get API keys from Algolia dashboard",
        pricing=ApiPricing(
            has_free_tier=True, starting_price="$29/month", pricing_url="https://www.algolia.com/pricing"
        ),
    ),
    "image-handling": ApiRequirement(
        name="Cloudinary",
        purpose="Image optimization and transformation",
        provider="Cloudinary",
        api_key_instructions="Get API keys from Cloudinary dashboard",
        pricing=ApiPricing(
            has_free_tier=True, starting_price="$49/month", pricing_url="https://cloudinary.com/pricing"
        ),
    ),
}

VERCEL_STEPS = [
    "Connect GitHub repository",
    "Configure environment variables",
    "Deploy to Vercel",
]
VERCEL_COST = "Free tier available, $20+/month for pro features"


def _has(feature: str) -> Rule:
    return lambda site_type, features: feature in features


def _is(*types: WebsiteType) -> Rule:
    return lambda site_type, features: site_type in types


def _always(site_type: WebsiteType, features: list[str]) -> bool:
    return True


DATABASE_RULES: list[tuple[Rule, DatabaseRequirement]] = [
    (_has("real-time"), DatabaseRequirement(
        type="supabase",
        reason="Real-time capabilities needed for live updates",
        setup_steps=[
            "Create Supabase account",
            "Create new project",
            "Get database credentials",
            "Set up database schema",
        ],
    )),
    (_is(WebsiteType.ECOMMERCE, WebsiteType.MARKETPLACE), DatabaseRequirement(
        type="postgresql",
        reason="Relational database needed for complex product relationships and transactions",
        setup_steps=["Set up PostgreSQL database", "Configure connection", "Run migrations"],
    )),
    (_always, DatabaseRequirement(
        type="mongodb",
        reason="Flexible document database for rapid development",
        setup_steps=["Create MongoDB Atlas account", "Set up cluster", "Get connection string"],
    )),
]

HOSTING_RULES: list[tuple[Rule, HostingRequirement]] = [
    (lambda site_type, features: site_type == WebsiteType.WEB3 or "web3-auth" in features,
     HostingRequirement(provider="vercel", type="serverless", setup_steps=VERCEL_STEPS, estimated_cost=VERCEL_COST)),
    (_always,
     HostingRequirement(provider="vercel", type="ssr", setup_steps=VERCEL_STEPS, estimated_cost=VERCEL_COST)),
]

AUTH_RULES: list[tuple[Rule, AuthRequirement]] = [
    (_has("web3-auth"), AuthRequirement(
        type="web3",
        providers=["WalletConnect", "MetaMask", "Phantom"],
        setup_steps=["Install wallet adapters", "Configure supported chains", "Set up authentication flow"],
    )),
    (_has("social-auth"), AuthRequirement(
        type="oauth",
        providers=["Google", "GitHub", "Twitter"],
        setup_steps=["Set up OAuth applications", "Configure authentication providers", "Implement sign-in flow"],
    )),
    (_always, AuthRequirement(
        type="jwt",
        providers=["Email/Password"],
        setup_steps=["Set up authentication backend", "Configure JWT settings", "Implement authentication flow"],
    )),
]

# Optional fields: no row matches -> field is absent
PAYMENT_RULES: list[tuple[Rule, PaymentRequirement]] = [
    (lambda site_type, features: "payments" in features and "crypto-payments" in features, PaymentRequirement(
        provider="web3",
        features=["token payments", "wallet integration"],
        setup_steps=["Set up wallet connection", "Configure supported tokens", "Implement payment flow"],
    )),
    (_has("payments"), PaymentRequirement(
        provider="stripe",
        features=["one-time payments", "subscriptions"],
        setup_steps=["Create Stripe account", "Get API keys", "Set up webhook endpoints"],
    )),
]

STORAGE_RULES: list[tuple[Rule, StorageRequirement]] = [
    (lambda site_type, features: "file-upload" in features and site_type == WebsiteType.WEB3, StorageRequirement(
        type="ipfs",
        purpose="Decentralized file storage",
        setup_steps=["Set up IPFS node", "Configure pinning service", "Implement upload flow"],
    )),
    (_has("file-upload"), StorageRequirement(
        type="s3",
        purpose="File storage and CDN",
        setup_steps=["Create S3 bucket", "Configure CORS", "Set up CloudFront"],
    )),
]


def _first_match(rules, site_type: WebsiteType, features: list[str]):
    for matches, value in rules:
        if matches(site_type, features):
            # rule tables are shared, hand out copies
            return value.model_copy(deep=True)
    return None


def detect_website_type(prompt: str) -> WebsiteType:
    text = prompt.lower()
    for site_type, triggers in TYPE_RULES:
        if any(trigger in text for trigger in triggers):
            return site_type
    return WebsiteType.CUSTOM


def extract_features(prompt: str) -> list[str]:
    text = prompt.lower()
    return [
        feature for feature, triggers in FEATURE_TRIGGERS.items()
        if any(trigger in text for trigger in triggers)
    ]


def analyze_requirements(prompt: str) -> Requirements:
    """Classify a free-text prompt. Total: unknown prompts fall back to `custom`."""
    site_type = detect_website_type(prompt)
    features = extract_features(prompt)

    return Requirements(
        type=site_type,
        features=features,
        integrations=[INTEGRATIONS[f].model_copy(deep=True) for f in INTEGRATIONS if f in features],
        database=_first_match(DATABASE_RULES, site_type, features),
        apis=[APIS[f].model_copy(deep=True) for f in APIS if f in features],
        hosting=_first_match(HOSTING_RULES, site_type, features),
        auth=_first_match(AUTH_RULES, site_type, features),
        payments=_first_match(PAYMENT_RULES, site_type, features),
        storage=_first_match(STORAGE_RULES, site_type, features),
    )
