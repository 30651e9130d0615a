"""
Prompts and function schema for the face analysis calls.
"""

FACE_ANALYSIS_PROMPT = (
    "Analyze this high-resolution image of a human face. Identify the person's face shape, "
    "symmetry, eyebrow position, eye spacing, nose shape, and jawline. Based on this information, "
    "provide insights aligned with traditional Chinese face reading and modern personality theories. "
    "Provide a detailed analysis in JSON format. Include personality traits, age, health indicators, "
    "and beauty features.\n\n"
    "Personality traits must be short labels (one to three words), not sentences.\n\n"
    "For beauty and symmetry scores, ensure all values are between 0 and 1 "
    "(will be converted to percentages 0-100%). This includes:\n"
    "- symmetry_score (0-1)\n"
    "- golden_ratio_score (0-1)\n"
    "- aesthetic_balance.score (0-1)"
)

CELEBRITY_MATCH_PROMPT = (
    "Based on this person's facial features, find 3-5 celebrities who share similar facial "
    "characteristics. Consider:\n"
    "1. Overall facial structure and shape\n"
    "2. Eye shape and spacing\n"
    "3. Nose shape and size\n"
    "4. Jawline and chin structure\n"
    "5. Facial proportions\n\n"
    "Return the results in this JSON format:\n"
    "{\n"
    '  "celebrity_matches": [\n'
    "    {\n"
    '      "name": "Celebrity name",\n'
    '      "similarity": 0.85,\n'
    '      "features": ["List of specific facial features that match"]\n'
    "    }\n"
    "  ]\n"
    "}\n"
    "similarity is a score between 0 and 1."
)


def _string_list(description: str = None) -> dict:
    schema = {"type": "array", "items": {"type": "string"}}
    if description:
        schema["description"] = description
    return schema


def _scored_level(description: str) -> dict:
    return {
        "type": "object",
        "properties": {
            "value": {"type": "number", "description": description},
            "interpretation": {"type": "string"},
        },
    }


ANALYZE_FACE_FUNCTION = {
    "name": "analyze_face",
    "description": "Analyze facial features and provide detailed insights",
    "parameters": {
        "type": "object",
        "properties": {
            "analysis": {
                "type": "string",
                "description": "A detailed analysis of the face",
            },
            "positive_traits": _string_list("List of positive personality traits"),
            "negative_traits": _string_list("List of negative personality traits"),
            "personality_analysis": {
                "type": "object",
                "properties": {
                    "facial_features": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "feature": {"type": "string"},
                                "interpretation": {"type": "string"},
                            },
                        },
                    },
                    "mian_xiang": {
                        "type": "object",
                        "properties": {
                            "elements": _string_list(),
                            "interpretation": {"type": "string"},
                        },
                    },
                    "physiognomy": {
                        "type": "object",
                        "properties": {
                            "traits": _string_list(),
                            "interpretation": {"type": "string"},
                        },
                    },
                },
            },
            "age_health_analysis": {
                "type": "object",
                "properties": {
                    "estimated_age": {
                        "type": "number",
                        "description": "Estimated chronological age",
                    },
                    "biological_age": {
                        "type": "number",
                        "description": "Estimated biological age based on facial features",
                    },
                    "health_indicators": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "indicator": {"type": "string"},
                                "status": {"type": "string"},
                            },
                        },
                    },
                    "stress_level": _scored_level("Stress level between 0 and 1"),
                    "fatigue_level": _scored_level("Fatigue level between 0 and 1"),
                    "hydration_level": _scored_level("Hydration level between 0 and 1"),
                },
            },
            "beauty_analysis": {
                "type": "object",
                "properties": {
                    "symmetry_score": {
                        "type": "number",
                        "description": "Score between 0 and 1 representing facial symmetry",
                    },
                    "golden_ratio_score": {
                        "type": "number",
                        "description": "Score between 0 and 1 representing match with golden ratio",
                    },
                    "aesthetic_balance": {
                        "type": "object",
                        "properties": {
                            "score": {
                                "type": "number",
                                "description": "Score between 0 and 1 representing aesthetic balance",
                            },
                            "interpretation": {"type": "string"},
                        },
                    },
                },
            },
        },
        "required": [
            "analysis",
            "positive_traits",
            "negative_traits",
            "personality_analysis",
            "age_health_analysis",
            "beauty_analysis",
        ],
    },
}


def image_message(prompt: str, image_b64: str, mimetype: str) -> list:
    """Build a single user message carrying the prompt and an inline image."""
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{mimetype};base64,{image_b64}"},
                },
            ],
        }
    ]
