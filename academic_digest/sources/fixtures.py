"""Canned records used by adapters in mock mode.

Shapes follow each upstream API: arXiv entries carry categories, Crossref works
carry a DOI, container title, subjects and a citation count.
"""

from __future__ import annotations

from typing import Any

from academic_digest.config import AcademicField

ARXIV_TEMPLATES: dict[AcademicField, list[dict[str, Any]]] = {
    AcademicField.AI_COMPUTING: [
        {
            "title": "Large Language Models Show Emergent Mathematical Reasoning Abilities",
            "summary": (
                "We demonstrate that scale alone can produce unexpected mathematical reasoning "
                "capabilities in language models without explicit training. Our analysis of models "
                "ranging from 1B to 175B parameters reveals a sharp phase transition in mathematical "
                "problem-solving ability that emerges around 70B parameters."
            ),
            "authors": ["Alex Kumar", "Lisa Zhang", "Michael Johnson"],
            "categories": ["cs.AI", "cs.LG"],
        },
        {
            "title": "Efficient Fine-Tuning of Pretrained Models for Domain Adaptation",
            "summary": (
                "We propose a novel parameter-efficient fine-tuning method that adapts large "
                "pretrained models to new domains using only 0.1% of trainable parameters. Our "
                "approach achieves comparable performance to full fine-tuning while reducing "
                "computational costs by three orders of magnitude."
            ),
            "authors": ["Sarah Chen", "David Liu", "Emma Wilson"],
            "categories": ["cs.CL", "cs.LG"],
        },
        {
            "title": "Self-Supervised Depth Estimation for Low-Cost Mobile Robots",
            "summary": (
                "We developed a self-supervised neural network that estimates dense depth from a "
                "single camera on embedded hardware. The method runs 4 times faster than prior work "
                "and improved navigation success by 23% accuracy in cluttered indoor environments."
            ),
            "authors": ["Priya Natarajan", "Tom Becker"],
            "categories": ["cs.RO", "cs.CV"],
        },
    ],
    AcademicField.LIFE_SCIENCES: [
        {
            "title": "CRISPR Gene Editing Shows Promise for Rare Genetic Disorders",
            "summary": (
                "Researchers demonstrate successful gene editing in patient-derived cells, showing "
                "potential therapeutic applications for three rare genetic conditions. The study "
                "utilized CRISPR-Cas9 to correct pathogenic mutations with 78% efficiency and no "
                "detectable off-target effects."
            ),
            "authors": ["Sarah Chen, PhD", "Michael Rodriguez, MD", "Emma Thompson, PhD"],
            "categories": ["q-bio.GN", "q-bio.MN"],
        },
        {
            "title": "Machine Learning Predicts Protein Structure from Sequence Data",
            "summary": (
                "We present a deep learning approach that predicts 3D protein structures with "
                "atomic-level accuracy using only amino acid sequence information. Our method "
                "achieves state-of-the-art results on benchmark datasets and successfully predicts "
                "structures for previously unsolved proteins."
            ),
            "authors": ["James Wilson", "Maria Garcia", "Robert Taylor"],
            "categories": ["q-bio.BM", "cs.LG"],
        },
        {
            "title": "Collective Migration of Epithelial Cells Follows Local Stiffness Gradients",
            "summary": (
                "Time-lapse imaging revealed that epithelial sheets migrate toward stiffer "
                "substrates through coordinated traction forces. A simple mechanical model "
                "reproduces the observed behavior and could guide the design of tissue scaffolds."
            ),
            "authors": ["Hannah Osei", "Lukas Brandt"],
            "categories": ["q-bio.CB"],
        },
    ],
    AcademicField.CLIMATE_EARTH_SYSTEMS: [
        {
            "title": "Convective Storm Frequency Rises Faster Than Mean Warming Over Tropical Land",
            "summary": (
                "Using two decades of satellite observations we found that intense convective "
                "storms over tropical land increased 2 times faster than the mean surface warming "
                "trend. The results suggest current climate models underestimate extreme rainfall "
                "risk under climate change."
            ),
            "authors": ["Ana Souza", "Kwame Mensah", "Ingrid Holm"],
            "categories": ["physics.ao-ph"],
        },
        {
            "title": "Seismic Imaging Reveals Hidden Meltwater Channels Beneath Greenland Ice",
            "summary": (
                "Dense seismic arrays revealed a network of subglacial meltwater channels beneath "
                "the Greenland ice sheet. The approach provides a new tool for monitoring ice "
                "dynamics, although coverage limitations remain a challenge."
            ),
            "authors": ["Erik Lund", "Mei Tanaka"],
            "categories": ["physics.geo-ph"],
        },
    ],
    AcademicField.HUMANITIES_CULTURE: [
        {
            "title": "Computational Analysis of Narrative Voice in Nineteenth-Century Novels",
            "summary": (
                "We developed a stylometric method that distinguishes free indirect discourse from "
                "direct narration across 4,000 digitized novels. The analysis showed a steady rise "
                "in free indirect style after 1850 and provides a tool for literary historians."
            ),
            "authors": ["Claire Dubois", "Samuel Okafor"],
            "categories": ["cs.CL", "cs.DL"],
        },
        {
            "title": "Retrieval of Oral History Archives with Multilingual Embeddings",
            "summary": (
                "Oral history collections remain hard to search across languages. We present a "
                "retrieval approach using multilingual embeddings that improved recall by 31% "
                "accuracy on a newly annotated benchmark of community archives."
            ),
            "authors": ["Lina Haddad", "Jorge Ramos", "Aiko Sato"],
            "categories": ["cs.IR"],
        },
    ],
    AcademicField.POLICY_GOVERNANCE: [
        {
            "title": "Algorithmic Transparency Mandates and Public Trust in Automated Decisions",
            "summary": (
                "A survey experiment with 6,000 respondents revealed that disclosure requirements "
                "for automated public decisions increase trust only when paired with an appeal "
                "mechanism. The findings could inform public policy on algorithmic accountability."
            ),
            "authors": ["Rebecca Moore", "Daniel Kim"],
            "categories": ["cs.CY"],
        },
        {
            "title": "Coalition Stability in Climate Treaty Negotiations: A Game-Theoretic Model",
            "summary": (
                "We develop a game-theoretic model of treaty coalitions with side payments. The "
                "model showed that modest transfer schemes can stabilize coalitions that would "
                "otherwise collapse, offering a practical approach for negotiators."
            ),
            "authors": ["Felix Wagner", "Nadia Rahman", "Omar Haddad"],
            "categories": ["cs.GT"],
        },
    ],
}

CROSSREF_TEMPLATES: dict[AcademicField, list[dict[str, Any]]] = {
    AcademicField.AI_COMPUTING: [
        {
            "DOI": "10.1000/182",
            "title": ["Machine Learning Advances in Natural Language Understanding"],
            "type": "journal-article",
            "container-title": ["Nature Machine Intelligence"],
            "subject": ["Artificial Intelligence", "Machine Learning", "Natural Language Processing"],
            "is-referenced-by-count": 15,
            "abstract": (
                "Recent advances in transformer architectures have significantly improved natural "
                "language understanding capabilities. This paper presents a comprehensive analysis "
                "of state-of-the-art models and their applications across various domains."
            ),
        },
        {
            "DOI": "10.1000/183",
            "title": ["Quantum Machine Learning: A Comprehensive Review"],
            "type": "review-article",
            "container-title": ["Reviews of Modern Physics"],
            "subject": ["Quantum Physics", "Machine Learning", "Computational Physics"],
            "is-referenced-by-count": 42,
            "abstract": (
                "We provide a comprehensive review of the emerging field of quantum machine "
                "learning, covering theoretical foundations, practical implementations, and "
                "potential applications in scientific computing."
            ),
        },
    ],
    AcademicField.LIFE_SCIENCES: [
        {
            "DOI": "10.1000/184",
            "title": ["Novel Protein Structure Prediction Method Achieves Near-Experimental Accuracy"],
            "type": "journal-article",
            "container-title": ["Nature"],
            "subject": ["Structural Biology", "Computational Biology", "Bioinformatics"],
            "is-referenced-by-count": 28,
            "abstract": (
                "We present a novel deep learning approach for protein structure prediction that "
                "achieves accuracy comparable to experimental methods. Our model successfully "
                "predicts structures for proteins with unknown 3D structures."
            ),
        },
        {
            "DOI": "10.1000/185",
            "title": ["CRISPR-Cas9 Off-Target Effects: Comprehensive Analysis and Mitigation Strategies"],
            "type": "journal-article",
            "container-title": ["Cell"],
            "subject": ["Genetics", "Molecular Biology", "Genome Editing"],
            "is-referenced-by-count": 35,
            "abstract": (
                "A comprehensive analysis of CRISPR-Cas9 off-target effects reveals patterns in "
                "genomic regions susceptible to unintended modifications. We propose novel "
                "strategies to minimize off-target activity while maintaining editing efficiency."
            ),
        },
    ],
    AcademicField.CLIMATE_EARTH_SYSTEMS: [
        {
            "DOI": "10.1000/186",
            "title": ["Ocean Heat Uptake Accelerates in the Southern Hemisphere"],
            "type": "journal-article",
            "container-title": ["Nature Climate Change"],
            "subject": ["Climate Science", "Oceanography"],
            "is-referenced-by-count": 22,
            "abstract": (
                "Argo float records demonstrated that Southern Ocean heat uptake increased "
                "significantly over the last decade. The trend accounts for most of the global "
                "ocean heat gain and matters for projections of climate change."
            ),
        },
        {
            "DOI": "10.1000/187",
            "title": ["Regional Sustainability Pathways for Agricultural Water Use"],
            "type": "journal-article",
            "container-title": ["Environmental Research Letters"],
            "subject": ["Environmental Science", "Earth System Science"],
            "is-referenced-by-count": 9,
            "abstract": (
                "We combine hydrological modeling with crop data to evaluate sustainability "
                "pathways for irrigation. Scenarios with deficit irrigation achieved a 20% "
                "reduction in groundwater depletion without yield losses."
            ),
        },
    ],
    AcademicField.HUMANITIES_CULTURE: [
        {
            "DOI": "10.1000/188",
            "title": ["Museums, Memory and the Afterlives of Colonial Collections"],
            "type": "journal-article",
            "container-title": ["Journal of Cultural Heritage"],
            "subject": ["Cultural Studies", "History"],
            "is-referenced-by-count": 12,
            "abstract": (
                "Drawing on archival research in four European museums, this article traces how "
                "colonial collections were reinterpreted after 1960. It argues that curatorial "
                "practice shaped public memory as much as formal restitution debates."
            ),
        },
        {
            "DOI": "10.1000/189",
            "title": ["Translation and Authority in Early Modern Scientific Print"],
            "type": "book-chapter",
            "container-title": ["Cambridge Studies in Intellectual History"],
            "subject": ["History", "Philosophy", "Literature"],
            "is-referenced-by-count": 4,
            "abstract": (
                "This chapter examines how translators of early modern scientific treatises "
                "negotiated authority with authors and printers. Close readings of prefaces "
                "revealed strategies that shaped the reception of new natural philosophy."
            ),
        },
    ],
    AcademicField.POLICY_GOVERNANCE: [
        {
            "DOI": "10.1000/190",
            "title": ["Participatory Budgeting and Municipal Service Delivery"],
            "type": "journal-article",
            "container-title": ["Public Administration Review"],
            "subject": ["Public Policy", "Public Administration"],
            "is-referenced-by-count": 18,
            "abstract": (
                "Using a panel of 300 municipalities we found that participatory budgeting "
                "improved sanitation coverage and reduced infant mortality. The effect was "
                "strongest where civil society organizations were already active."
            ),
        },
        {
            "DOI": "10.1000/191",
            "title": ["Regulatory Sandboxes for Financial Technology: Evidence from Twelve Jurisdictions"],
            "type": "journal-article",
            "container-title": ["Regulation & Governance"],
            "subject": ["Political Science", "Public Policy"],
            "is-referenced-by-count": 7,
            "abstract": (
                "We compare regulatory sandbox programs across twelve jurisdictions. Sandboxes "
                "increased market entry but provided limited evidence for consumer protection "
                "gains, a challenge for governance of emerging technologies."
            ),
        },
    ],
}

MOCK_AUTHORS = [
    ("John", "Smith"),
    ("Sarah", "Johnson"),
    ("Michael", "Chen"),
    ("Emily", "Davis"),
    ("David", "Wilson"),
    ("Lisa", "Brown"),
    ("James", "Taylor"),
    ("Maria", "Garcia"),
]
