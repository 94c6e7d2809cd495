from __future__ import annotations

from typing import Optional

from app.schemas.resource import Resource

RESOURCES_PATH = "/resources"


def _resource(slug: str, title: str, description: str, type: str, category: str, content: str) -> Resource:
    return Resource(
        slug=slug, title=title, description=description, type=type,
        category=category, link=f"{RESOURCES_PATH}/{slug}", content=content,
    )


# HTML fragments rendered as-is by the client
RESOURCES: list[Resource] = [
    _resource(
        "anxiety",
        "Understanding Anxiety",
        "Learn about the causes, symptoms, and treatments for anxiety disorders.",
        "Article",
        "Anxiety",
        "<h2>Understanding Anxiety</h2>"
        "<p>Anxiety is a normal and often healthy emotion. However, when a person regularly feels "
        "disproportionate levels of anxiety, it might become a medical disorder.</p>"
        "<p>Anxiety disorders form a category of mental health diagnoses that lead to excessive "
        "nervousness, fear, apprehension, and worry.</p>"
        "<h3>Common symptoms include:</h3>"
        "<ul><li>Feeling nervous, restless or tense</li>"
        "<li>Having a sense of impending danger, panic or doom</li>"
        "<li>Increased heart rate</li>"
        "<li>Breathing rapidly (hyperventilation)</li>"
        "<li>Sweating</li><li>Trembling</li><li>Feeling weak or tired</li>"
        "<li>Trouble concentrating</li><li>Having difficulty sleeping</li></ul>"
        "<h3>Treatment options:</h3>"
        "<ul><li>Cognitive Behavioral Therapy (CBT)</li><li>Medication (SSRIs, SNRIs)</li>"
        "<li>Lifestyle changes</li><li>Stress management techniques</li><li>Support groups</li></ul>",
    ),
    _resource(
        "meditation",
        "Mindfulness Meditation Guide",
        "A step-by-step guide to practicing mindfulness meditation for stress reduction.",
        "Guide",
        "Meditation",
        "<h2>Mindfulness Meditation Guide</h2>"
        "<p>Mindfulness meditation is a mental training practice that teaches you to slow down racing "
        "thoughts, let go of negativity, and calm both your mind and body.</p>"
        "<h3>Basic mindfulness meditation:</h3>"
        "<ol><li><strong>Find a quiet and comfortable place.</strong> Sit in a chair or on the floor "
        "with your head, neck, and back straight but not stiff.</li>"
        "<li><strong>Set a time limit.</strong> If you're just beginning, it can help to choose a short "
        "time, such as 5 or 10 minutes.</li>"
        "<li><strong>Notice your body.</strong> Be aware of your body seated.</li>"
        "<li><strong>Feel your breath.</strong> Follow the sensation of your breath as it goes in and "
        "as it goes out.</li>"
        "<li><strong>Notice when your mind has wandered.</strong> When you notice this, simply return "
        "your attention to the breath.</li>"
        "<li><strong>Be kind to your wandering mind.</strong> Don't judge yourself. Just come back to "
        "your breath.</li>"
        "<li><strong>Close with gratitude.</strong> Notice how your body feels right now. Notice your "
        "thoughts and emotions.</li></ol>"
        "<p>Practice this meditation for a few minutes daily and gradually increase the duration as you "
        "become more comfortable with the practice.</p>",
    ),
    _resource(
        "depression",
        "CBT Techniques for Depression",
        "Explore cognitive-behavioral therapy techniques to manage symptoms of depression.",
        "Technique",
        "Depression",
        "<h2>CBT Techniques for Depression</h2>"
        "<p>Cognitive Behavioral Therapy (CBT) is one of the most effective treatments for depression. "
        "It works by identifying and changing negative thought patterns and behaviors that contribute "
        "to depressive symptoms.</p>"
        "<h3>Key CBT techniques for depression:</h3>"
        "<ol><li><strong>Thought Records:</strong> Identify negative thoughts, evaluate the evidence for "
        "and against them, and develop more balanced perspectives.</li>"
        "<li><strong>Behavioral Activation:</strong> Schedule and engage in pleasurable activities to "
        "counter withdrawal and inactivity.</li>"
        "<li><strong>Problem-Solving:</strong> Develop structured approaches to life problems that may "
        "be contributing to depression.</li>"
        "<li><strong>Cognitive Restructuring:</strong> Recognize and challenge cognitive distortions "
        "like all-or-nothing thinking and catastrophizing.</li>"
        "<li><strong>Mindfulness:</strong> Practice being present in the moment without judgment to "
        "reduce rumination.</li></ol>"
        "<p>Regular practice is key to seeing improvement.</p>",
    ),
    _resource(
        "breathing",
        "Breathing Exercises for Anxiety",
        "Simple breathing techniques to help manage anxiety and panic attacks.",
        "Exercise",
        "Anxiety",
        "<h2>Breathing Exercises for Anxiety</h2>"
        "<p>Controlled breathing exercises can help reduce anxiety, stress, and panic by activating "
        "your body's relaxation response.</p>"
        "<h3>4-7-8 Breathing Technique:</h3>"
        "<ol><li>Sit comfortably with your back straight</li><li>Exhale completely through your mouth</li>"
        "<li>Inhale quietly through your nose to a mental count of 4</li>"
        "<li>Hold your breath for a count of 7</li>"
        "<li>Exhale completely through your mouth to a count of 8</li>"
        "<li>Repeat the cycle 3-4 times</li></ol>"
        "<h3>Box Breathing:</h3>"
        "<ol><li>Inhale slowly to a count of 4</li><li>Hold your breath for a count of 4</li>"
        "<li>Exhale slowly to a count of 4</li><li>Hold your breath for a count of 4</li>"
        "<li>Repeat as needed</li></ol>"
        "<h3>Diaphragmatic Breathing:</h3>"
        "<ol><li>Lie on your back with knees bent</li>"
        "<li>Place one hand on your upper chest and the other below your rib cage</li>"
        "<li>Breathe in slowly through your nose, feeling your stomach push against your hand</li>"
        "<li>Exhale through pursed lips, tightening your stomach muscles</li>"
        "<li>Practice for 5-10 minutes, 3-4 times per day</li></ol>",
    ),
    _resource(
        "sleep",
        "Improving Sleep Quality",
        "Evidence-based strategies to improve your sleep habits and quality.",
        "Guide",
        "Sleep",
        "<h2>Improving Sleep Quality</h2>"
        "<p>Quality sleep is essential for mental and physical health. Poor sleep can contribute to "
        "anxiety, depression, and reduced cognitive function.</p>"
        "<h3>Sleep Hygiene Tips:</h3>"
        "<ul><li><strong>Consistent schedule:</strong> Go to bed and wake up at the same time every day.</li>"
        "<li><strong>Create a restful environment:</strong> Keep your bedroom cool, dark, and quiet.</li>"
        "<li><strong>Limit screen time:</strong> Avoid screens for at least 1 hour before bedtime.</li>"
        "<li><strong>Watch your diet:</strong> Avoid large meals, caffeine, and alcohol before bedtime.</li>"
        "<li><strong>Regular exercise:</strong> Physical activity during the day can help you fall asleep.</li>"
        "<li><strong>Manage stress:</strong> Practice relaxation techniques before bed.</li>"
        "<li><strong>Limit naps:</strong> Avoid napping late in the day.</li></ul>"
        "<p>If sleep problems continue, consider speaking with a healthcare provider.</p>",
    ),
    _resource(
        "happiness",
        "Positive Psychology Practices",
        "Daily practices to increase happiness and build resilience.",
        "Exercise",
        "Happiness",
        "<h2>Positive Psychology Practices</h2>"
        "<p>Positive psychology focuses on strengths, virtues, and factors that help individuals and "
        "communities thrive.</p>"
        "<h3>Daily Practices:</h3>"
        "<ul><li><strong>Gratitude journaling:</strong> Write down three things you're grateful for each day.</li>"
        "<li><strong>Acts of kindness:</strong> Perform small acts of kindness for others regularly.</li>"
        "<li><strong>Savoring:</strong> Take time to fully experience positive moments.</li>"
        "<li><strong>Strengths use:</strong> Find new ways to use your character strengths daily.</li>"
        "<li><strong>Connection:</strong> Nurture your relationships with family, friends, and community.</li>"
        "<li><strong>Goal setting:</strong> Work toward meaningful goals that align with your values.</li></ul>"
        "<p>Even one or two of these practices can make a difference to your overall well-being.</p>",
    ),
]

_BY_SLUG: dict[str, Resource] = {r.slug: r for r in RESOURCES}


def categories() -> list[str]:
    """Distinct categories in catalogue order."""
    return list(dict.fromkeys(r.category for r in RESOURCES))


def list_resources(category: Optional[str] = None, query: Optional[str] = None) -> list[Resource]:
    """
    Filter the catalogue. Category matches exactly, ignoring case; the query is a
    case-insensitive substring of the title or description.
    """
    selected = RESOURCES
    if category:
        wanted = category.strip().lower()
        selected = [r for r in selected if r.category.lower() == wanted]
    if query:
        needle = query.strip().lower()
        selected = [r for r in selected if needle in r.title.lower() or needle in r.description.lower()]
    return list(selected)


def get_resource(slug: str) -> Optional[Resource]:
    return _BY_SLUG.get(slug.strip().lower())
