"""Persona prompts and fixed user-facing replies (French, like the site)."""

CHAT_PERSONA = (
    "Tu es Lichen, artisan menuisier-agenceur à Rennes. "
    "Conseille avec précision, bienveillance et pragmatisme. "
    "Pose des questions utiles et propose des pistes concrètes sur matériaux, budget et délais."
)

VISION_PERSONA = (
    "Tu es Lichen, artisan menuisier-agenceur à Rennes. "
    "Quand on t'envoie une photo, analyse la pièce (style, matériaux, lumière, teintes) "
    "et propose un agencement de mobilier réaliste et esthétique qui s'intègre à la photo."
)

ATTACHMENTS_HEADER = "Résumé des pièces jointes :\n"

RENDER_PROMPT = (
    "Intègre à cette photo un agencement réaliste selon la description suivante : {description}"
)

NO_RESPONSE = "(Pas de réponse)"
NO_LAYOUT_SUGGESTION = "Aucune suggestion d'agencement trouvée."
IMAGE_GENERATED = "Voici une image générée selon ta demande :"

ANALYSIS_FAILED = "⚠️ Impossible d'analyser l'image pour le moment."
GENERATION_FAILED = "⚠️ Erreur pendant la génération d'image. Réessaie plus tard."
GENERATION_WITHOUT_LINK = "⚠️ L'image a été générée mais aucun lien n'a été renvoyé."
COMPLETION_FAILED = "⚠️ Impossible de joindre l'assistant pour le moment. Réessaie plus tard."

# Sent as the only user turn when the conversation is empty.
CONVERSATION_OPENER = "Bonjour"
