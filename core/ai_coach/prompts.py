from core.enums import GoalType, SplitType
from core.schemas import Exercise, UserPreferences

SYSTEM_MESSAGE = """
    You are an experienced strength and conditioning coach. Design safe, effective
    gym routines and always return valid JSON that matches the requested schema.
"""

DEFAULT_GOAL_GUIDANCE = "Focus on balanced general health and fitness."

GOAL_GUIDANCE: dict[GoalType, str] = {
    GoalType.HYPERTROPHY: (
        "Focus on 8-12 rep range, progressive overload, and hitting all muscle groups evenly."
    ),
    GoalType.GLUTE_AND_SHAPE: (
        "Design a routine with high volume for glutes and hamstrings (hip thrusts, RDLs, lunges). "
        "For the upper body, focus on 'toning' rep ranges (12-15 reps) for shoulders and back to create "
        "an hourglass illusion, but minimize heavy trap or pec isolation work."
    ),
    GoalType.METABOLIC_CONDITIONING: (
        "Create a routine that utilizes supersets, circuits, or AMRAPs. Keep rest periods short (30-60s) "
        "to keep the heart rate elevated. Focus on compound movements that recruit large muscle groups "
        "to maximize caloric expenditure."
    ),
    GoalType.MAX_STRENGTH: (
        "Focus on the big 3/4 compound lifts (Squat, Bench, Deadlift, Overhead Press). Lower rep ranges "
        "(1-5 reps), longer rest periods (3-5 mins), high intensity relative to 1RM."
    ),
    GoalType.FUNCTIONAL_HYBRID: (
        "Incorporate unilateral movements, plyometrics, and core stability. Focus on movement quality and "
        "explosive power rather than just 1RM strength. Mix resistance training with mobility work."
    ),
    GoalType.LONGEVITY: (
        "Focus on joint health, mobility, and moderate resistance. Prioritize safety and sustainable "
        "movement patterns over heavy loading."
    ),
}

FULL_BODY_GUIDANCE = (
    "The user explicitly requested a FULL BODY routine. Every session MUST target the entire body "
    "(e.g. Squat/Hinge, Push, Pull, Carry/Core). Do not split by body parts."
)

SPLIT_GUIDANCE = (
    "The user explicitly requested a SPLIT routine. Divide the body parts logically across the available "
    "days (e.g. Upper/Lower for 4 days, PPL for 6 days, or Push/Pull/FullBody for 3 days)."
)

PLAN_PROMPT = """
    Create a detailed weekly gym routine based on the following user preferences:
    - Training Days per Week: {days_per_week}
    - Maximum Consecutive Rest Days: {max_rest_days}
    - Routine Structure: {split_type}
    - Primary Goal: {goal}
    - Focus Areas (Undeveloped body parts): {focus_areas}
    - Injuries/Limitations: {injuries}

    CRITICAL INJURY SAFETY CHECK:
    The user has reported the following injuries: "{injuries}".
    - You must perform a safety validation for every single exercise selected.
    - If an exercise typically aggravates the listed injury (e.g., Barbell Squats for "bad knees"), you MUST replace it with a joint-friendly alternative (e.g., Reverse Lunges or Leg Press) or remove it.
    - Do not list exercises that are widely known to be high-risk for the specific reported injury.
    - If you make a substitution for safety, mention "injury-friendly variation" in the notes.

    IMPORTANT INSTRUCTIONS:
    1. ROUTINE STRUCTURE: {split_guidance}
    2. Include rest days explicitly in the schedule to match a 7-day cycle.
    3. Provide specific sets and rep ranges aligned with the goal.
    4. Provide clear, step-by-step execution instructions (3-5 steps) for every exercise.
    5. SPECIFIC GOAL STRATEGY: {goal_guidance}
"""

ALTERNATIVES_PROMPT = """
    The user wants to swap out the exercise "{name}" which targets the {muscle_group}.

    Target Muscle Group: {muscle_group}
    Original Volume: {sets} sets x {reps} reps
    User's Reported Injuries: "{injuries}"

    Your Goal:
    Suggest 3 alternative exercises that target the same muscle group but are biomechanically distinct or use different equipment.

    INJURY SAFETY PROTOCOL:
    The user has reported the following injuries: "{injuries}".
    1. You MUST evaluate each alternative against these injuries.
    2. If an exercise is known to aggravate the reported injury (e.g. Squats for bad knees, Overhead press for shoulder impingement), DO NOT suggest it.
    3. In the 'notes' field for each alternative, you MUST explain WHY this specific exercise is a safer option for their injury (e.g. "Leg Press provides back support which protects the lumbar spine compared to Barbell Squats").
    4. If no injuries are reported, use the 'notes' field to explain the benefit of this variation (e.g. "Focuses more on the peak contraction").

    Output requirements:
    - 3 distinct exercises.
    - Adjust sets and reps if the nature of the exercise changes (e.g. isolation movements often require higher reps than compounds).
    - Provide 3-5 concise, step-by-step execution instructions.
"""

IMAGE_PROMPT = """
    Generate a professional, photorealistic studio photograph of a fitness model performing the "{name}" exercise.

    REQUIREMENTS:
    - Style: High-quality sports photography, 8k resolution, highly detailed, cinematic lighting.
    - Subject: A fit individual showing correct anatomical form.
    - Background: Clean, neutral studio background (white or light grey).
    - NOT ALLOWED: Do not produce cartoons, vector art, 3D renders, drawings, or abstract illustrations. The image must look like a real photo.
"""


def _or_none(text: str) -> str:
    return text.strip() or "None"


def goal_guidance(goal: GoalType | str) -> str:
    if not isinstance(goal, GoalType):
        try:
            goal = GoalType(goal)
        except ValueError:
            return DEFAULT_GOAL_GUIDANCE
    return GOAL_GUIDANCE.get(goal, DEFAULT_GOAL_GUIDANCE)


def split_guidance(split_type: SplitType) -> str:
    return FULL_BODY_GUIDANCE if split_type is SplitType.FULL_BODY else SPLIT_GUIDANCE


def build_plan_prompt(prefs: UserPreferences) -> str:
    return PLAN_PROMPT.format(
        days_per_week=prefs.days_per_week,
        max_rest_days=prefs.max_consecutive_rest_days,
        split_type=str(prefs.split_type),
        goal=str(prefs.goal),
        focus_areas=_or_none(prefs.focus_areas),
        injuries=_or_none(prefs.injuries),
        split_guidance=split_guidance(prefs.split_type),
        goal_guidance=goal_guidance(prefs.goal),
    )


def build_alternatives_prompt(exercise: Exercise, injuries: str) -> str:
    return ALTERNATIVES_PROMPT.format(
        name=exercise.name,
        muscle_group=exercise.muscle_group,
        sets=exercise.sets,
        reps=exercise.reps,
        injuries=_or_none(injuries or ""),
    )


def build_image_prompt(exercise_name: str) -> str:
    return IMAGE_PROMPT.format(name=exercise_name)
