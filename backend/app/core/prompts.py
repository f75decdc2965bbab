ARCHITECTURE_PROMPT = """You are an expert full-stack developer. Generate a complete {site_type} website with modern UI, secure backend, and proper database design.
Features: {features}
Integrations: {integrations}"""

CODE_PROMPT = "Generate production-ready {component} code for a {site_type} website. Respond with concise, well-commented code only."

CODE_USER_PROMPT = "Generate {component} code for: {prompt}"

CONTRACTS_PROMPT = "Generate production-ready smart contracts. Respond with concise, well-commented Solidity code only."

CONTRACTS_USER_PROMPT = "Generate smart contracts for: {prompt}"

PREVIEW_PROMPT = (
    "Generate a single self-contained HTML file (inline CSS/JS) that showcases the landing page "
    "for the website described below. No external resources. Use TailwindCDN is NOT allowed; "
    "use inline styles only."
)

PREVIEW_USER_PROMPT = "Generate preview HTML for: {prompt}"

FALLBACK_PREVIEW_HTML = "<html><body><h1>Preview unavailable</h1></body></html>"
