"""
Static sample questions used to pad short recommendation lists.
"""

SAMPLE_QUESTIONS = [
    {
        "_id": "sample-1",
        "exam": "UPSC",
        "level": "Mains",
        "paper": "GS-2",
        "year": 2023,
        "question": "Discuss the role of the Finance Commission in strengthening cooperative federalism in India.",
        "topicTags": ["Polity", "Federalism"],
        "keywords": ["Finance Commission", "fiscal federalism"],
        "theme": "Polity",
        "sourceLink": "https://upsc.gov.in",
        "verified": True,
    },
    {
        "_id": "sample-2",
        "exam": "UPSC",
        "level": "Mains",
        "paper": "GS-3",
        "year": 2022,
        "question": "Examine the challenges of balancing economic growth with climate commitments under India's updated NDCs.",
        "topicTags": ["Environment", "Economy"],
        "keywords": ["NDC", "climate change"],
        "theme": "Environment",
        "sourceLink": "https://upsc.gov.in",
        "verified": True,
    },
    {
        "_id": "sample-3",
        "exam": "UPSC",
        "level": "Prelims",
        "paper": "GS-1",
        "year": 2023,
        "question": "Which of the following statements about the Monsoon Trough and its influence on Indian rainfall is correct?",
        "topicTags": ["Geography"],
        "keywords": ["monsoon"],
        "theme": "Geography",
        "sourceLink": "https://upsc.gov.in",
        "verified": True,
    },
    {
        "_id": "sample-4",
        "exam": "UPSC",
        "level": "Mains",
        "paper": "GS-4",
        "year": 2021,
        "question": "What do you understand by probity in governance? Suggest measures to strengthen it in public service.",
        "topicTags": ["Ethics", "Governance"],
        "keywords": ["probity"],
        "theme": "Ethics",
        "sourceLink": "https://upsc.gov.in",
        "verified": True,
    },
    {
        "_id": "sample-5",
        "exam": "UPSC",
        "level": "Mains",
        "paper": "GS-1",
        "year": 2022,
        "question": "Assess the contribution of the Bhakti movement to the social and cultural fabric of medieval India.",
        "topicTags": ["History", "Culture"],
        "keywords": ["Bhakti movement"],
        "theme": "History",
        "sourceLink": "https://upsc.gov.in",
        "verified": True,
    },
]

SAMPLE_REASON = "Popular practice question"
