"""
Prompt construction for every completion-backed endpoint.

Each builder returns the system message followed by the user message. The
heading (``**Titre**``) and citation (``#Livre II#``) conventions are read by
the front-end, so their wording must not drift.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

UNSPECIFIED_POSITION = "Non spécifié"

CV_SECTIONS = [
    "Compétences Analysées",
    "Résumé du profil",
    "Adéquation au poste demandé",
    "Compétences manquantes",
]


@dataclass(frozen=True)
class Message:
    role: str  # "system" or "user"
    content: str


CV_SYSTEM_PROMPT = (
    "Vous êtes un assistant spécialisé en analyse de CV. "
    "Chaque titre sera entouré d'une double astérisque comme ceci : **Titre**"
)

LEGAL_SYSTEM_PROMPT = """les réponses n'ont pas pour objectif de répondre a la question mais de guider l'utilisateur dans les chapitres et sections du code pénal.
Vous êtes un assistant juridique.
Vos réponses serons organisé en plusieur titre, chaque titre doit etre entouré de deux astérix **Titre**.
Il est donc néccéssaire de seulement présciser dans quel livre, chapitre et section il est possible de trouver la réponse a la question,
toujours préciser de quel livre et chapitre viens la sections mentionné. et affiché le nom des livres, chapitre et section entouré par le charactère # et jamais entre **
exemple : **Différence entre meutre et homicide** #Livre II# #Chapitre 3# #section 1#
il est important de faire une légère explication.
utilise les information suivantes pour guider l'utilisateur :

{knowledge}

"""

PROMPT_HELPER_SYSTEM_PROMPT = (
    "Vous êtes un expert en rédaction de prompts pour les modèles de langage. "
    "À partir de la demande de l'utilisateur, rédigez un prompt clair, précis et complet "
    "qui permettra d'obtenir la meilleure réponse possible. "
    "Chaque titre sera entouré d'une double astérisque comme ceci : **Titre**"
)

AUDIO_SYSTEM_PROMPT = (
    "Vous êtes un assistant vocal. Répondez à la question en quelques phrases courtes, "
    "dans un style naturel destiné à être lu à voix haute, sans liste ni mise en forme."
)


def _position(job_position: Optional[str]) -> str:
    if job_position and job_position.strip():
        return job_position.strip()
    return UNSPECIFIED_POSITION


def _cv_user_prompt(cv_text: str, position: str) -> str:
    return f"""Voici le contenu du CV :
{cv_text}

Poste recherché par l'employeur : {position}

Veuillez analyser :
1. Listez les compétences mentionnées. Et mettre en titre "{CV_SECTIONS[0]}"
2. Fournissez un résumé du profil. Et mettre en titre "{CV_SECTIONS[1]}"
3. Indiquez si le candidat correspond au poste recherché. Et mettre en titre "{CV_SECTIONS[2]}"
4. Si nécessaire, indiquez quelles compétences supplémentaires sont nécessaires pour avoir un profil adéquat au poste recherché en faisant une liste.
  Et mettre en titre "{CV_SECTIONS[3]}"
"""


def build_cv_analysis_messages(
    cv_text: str, job_position: Optional[str] = None
) -> List[Message]:
    return [
        Message("system", CV_SYSTEM_PROMPT),
        Message("user", _cv_user_prompt(cv_text, _position(job_position))),
    ]


def build_cv_mission_messages(
    cv_text: str,
    job_position: Optional[str] = None,
    mission_text: Optional[str] = None,
) -> List[Message]:
    """CV analysis where the mission description extends the requested position"""
    position = _position(job_position)
    if mission_text and mission_text.strip():
        position = (
            f"{position}\n\nDescription de la mission :\n{mission_text.strip()}"
        )

    return [
        Message("system", CV_SYSTEM_PROMPT),
        Message("user", _cv_user_prompt(cv_text, position)),
    ]


def clean_question(question: str) -> str:
    """Collapse line breaks into single spaces"""
    return re.sub(r"[\r\n]+", " ", question).strip()


def build_legal_messages(question: str, knowledge: str) -> List[Message]:
    return [
        Message("system", LEGAL_SYSTEM_PROMPT.format(knowledge=knowledge)),
        Message("user", clean_question(question)),
    ]


def build_prompt_helper_messages(text: str) -> List[Message]:
    return [
        Message("system", PROMPT_HELPER_SYSTEM_PROMPT),
        Message("user", f"Rédige un prompt optimisé à partir de cette demande : {clean_question(text)}"),
    ]


def build_audio_script_messages(question: str) -> List[Message]:
    return [
        Message("system", AUDIO_SYSTEM_PROMPT),
        Message("user", clean_question(question)),
    ]
