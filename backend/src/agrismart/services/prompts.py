"""
AgriSmart Prompts Centralisés
Note : Les variables entre accolades {variable} sont à remplir avec .format().
Les accolades doublées {{ }} sont utilisées pour le texte qui doit rester tel quel (JSON).
"""

# =============================================================
# PERSONA GÉNÉRAL
# =============================================================
AGRISMART_SYSTEM = (
    "You are AgriSmart AI, a helpful and knowledgeable agricultural expert. "
    "You help farmers with crop selection, pest control, soil health, and market trends. "
    "Use a friendly and encouraging tone."
)

# =============================================================
# CONSEIL (texte libre)
# =============================================================
ADVICE_USER_TEMPLATE = """As an expert agricultural consultant, answer this farmer's question: {query}.
Context about their farm: {context}.
Provide practical, sustainable, and actionable advice."""

# =============================================================
# DOCTEUR DES PLANTES (vision, sortie JSON)
# =============================================================
DIAGNOSIS_PROMPT = """Analyze this plant image. Identify the plant, detect any diseases or pests, and provide a treatment plan.
Respond ONLY with a JSON object of this exact shape:
{{
  "plantName": "string",
  "healthStatus": "Healthy | Diseased | Pest Infestation",
  "diagnosis": "string",
  "treatment": ["string", "..."],
  "urgency": "Low | Medium | High"
}}"""

# =============================================================
# TENDANCES DU MARCHÉ (sortie JSON)
# =============================================================
MARKET_CROPS = ("Wheat", "Rice", "Corn", "Soybeans")

MARKET_TRENDS_PROMPT = """Provide current global market trends for major crops like {crops}.
Include a brief outlook for the next month.
Respond ONLY with a JSON object of this exact shape:
{{
  "trends": [
    {{
      "crop": "string",
      "priceTrend": "Rising | Falling | Stable",
      "currentPrice": "string",
      "outlook": "string"
    }}
  ]
}}"""
