DEFAULT_CATEGORIES = [
    {
        "name": "Career",
        "description": "Work, job changes and professional growth",
        "icon": "Briefcase",
        "color": "#F59E0B",
        "initial_questions": [
            {"id": "career-situation", "text": "What is happening at work right now?", "type": "text", "required": True, "order": 0},
            {
                "id": "career-focus",
                "text": "Which area do you want to focus on?",
                "type": "select",
                "options": ["Job search", "Workplace relationships", "Burnout", "Career change"],
                "required": True,
                "order": 1,
            },
        ],
    },
    {
        "name": "Family",
        "description": "Parents, siblings, children and home life",
        "icon": "Users",
        "color": "#10B981",
        "initial_questions": [
            {"id": "family-who", "text": "Who in your family is this about?", "type": "text", "required": True, "order": 0},
            {"id": "family-stress", "text": "How stressful does it feel right now?", "type": "scale", "required": False, "order": 1},
        ],
    },
    {
        "name": "Mental Health",
        "description": "Stress, anxiety, mood and emotional wellbeing",
        "icon": "Brain",
        "color": "#8B5CF6",
        "initial_questions": [
            {
                "id": "mood-today",
                "text": "How would you describe your mood today?",
                "type": "multiselect",
                "options": ["Anxious", "Sad", "Tired", "Calm", "Angry"],
                "required": True,
                "order": 0,
            },
            {"id": "mood-intensity", "text": "How intense is this feeling?", "type": "scale", "required": False, "order": 1},
        ],
    },
    {
        "name": "Other",
        "description": "Anything that does not fit another category",
        "icon": "HelpCircle",
        "color": "#6B7280",
        "initial_questions": [
            {"id": "other-topic", "text": "What would you like to talk about?", "type": "text", "required": True, "order": 0},
        ],
    },
    {
        "name": "Relationships",
        "description": "Dating, partners, friendships and breakups",
        "icon": "Heart",
        "color": "#EC4899",
        "initial_questions": [
            {"id": "relationship-type", "text": "What kind of relationship is this about?", "type": "select", "options": ["Partner", "Friend", "Colleague", "Other"], "required": True, "order": 0},
            {"id": "relationship-issue", "text": "What is the main concern?", "type": "text", "required": True, "order": 1},
        ],
    },
    {
        "name": "Self-Growth",
        "description": "Habits, goals and self-understanding",
        "icon": "Target",
        "color": "#3B82F6",
        "initial_questions": [
            {"id": "growth-goal", "text": "What goal are you working toward?", "type": "text", "required": True, "order": 0},
        ],
    },
    {
        "name": "Study",
        "description": "School, exams and learning",
        "icon": "BookOpen",
        "color": "#14B8A6",
        "initial_questions": [
            {"id": "study-level", "text": "What are you studying?", "type": "text", "required": False, "order": 0},
            {"id": "study-pressure", "text": "How much pressure do you feel?", "type": "scale", "required": False, "order": 1},
        ],
    },
]
