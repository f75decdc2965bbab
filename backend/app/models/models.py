from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # camelCase on the wire, snake_case in Python; immutable once built
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class WebsiteType(str, Enum):
    ECOMMERCE = "e-commerce"
    SOCIAL_MEDIA = "social-media"
    BLOG = "blog"
    PORTFOLIO = "portfolio"
    DASHBOARD = "dashboard"
    MARKETPLACE = "marketplace"
    WEB3 = "web3"
    SAAS = "saas"
    CUSTOM = "custom"


class IntegrationPricing(CamelModel):
    free: Optional[bool] = None
    starting_price: Optional[str] = None
    pricing_url: Optional[str] = None

class Integration(CamelModel):
    name: str
    purpose: str
    setup_steps: list[str]
    required_env_vars: list[str] = []
    pricing: Optional[IntegrationPricing] = None


class ApiPricing(CamelModel):
    has_free_tier: bool
    starting_price: Optional[str] = None
    pricing_url: Optional[str] = None

class ApiRequirement(CamelModel):
    name: str
    purpose: str
    provider: str
    api_key_instructions: str
    pricing: Optional[ApiPricing] = None


class DatabaseRequirement(CamelModel):
    type: str  # postgresql | mongodb | mysql | redis | supabase | firebase
    reason: str
    setup_steps: list[str]

class HostingRequirement(CamelModel):
    provider: str  # vercel | netlify | aws | gcp | custom
    type: str  # static | ssr | serverless
    setup_steps: list[str]
    estimated_cost: str

class AuthRequirement(CamelModel):
    type: str  # oauth | jwt | web3 | custom
    providers: list[str]
    setup_steps: list[str]

class PaymentRequirement(CamelModel):
    provider: str  # stripe | paypal | web3 | custom
    features: list[str]
    setup_steps: list[str]

class StorageRequirement(CamelModel):
    type: str  # s3 | cloudinary | firebase | ipfs | custom
    purpose: str
    setup_steps: list[str]


class Requirements(CamelModel):
    type: WebsiteType
    features: list[str]
    integrations: list[Integration]
    database: DatabaseRequirement
    apis: list[ApiRequirement]
    hosting: HostingRequirement
    auth: AuthRequirement
    payments: Optional[PaymentRequirement] = None
    storage: Optional[StorageRequirement] = None


class SetupBundle(CamelModel):
    env_variables: dict[str, str]
    install_commands: list[str]
    setup_instructions: list[str]

class CodeBundle(CamelModel):
    frontend: str
    backend: str
    database: str
    api: str
    contracts: Optional[str] = None

class PreviewRef(CamelModel):
    id: str
    url: str

class GenerationResult(CamelModel):
    explanation: str
    requirements: Requirements
    setup: SetupBundle
    code: CodeBundle
    preview: PreviewRef
