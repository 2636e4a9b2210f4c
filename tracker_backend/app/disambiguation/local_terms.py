"""
Curated ambiguous tracker names.

Each term maps to (value, label, description) triples. Values are slugs,
unique within a term, and every term carries between 4 and 8 entries so a
local hit already satisfies the ambiguity result band.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

Entry = Tuple[str, str, str]

_FLYING: List[Entry] = [
    ("air-travel", "Air Travel", "Track flights taken as a passenger: trips, duration, jet lag and comfort."),
    ("fear-of-flying", "Fear of Flying", "Track anxiety before and during flights and what helps you cope."),
    ("pilot-training", "Pilot Training", "Log flight hours, lessons and skills practiced as a student or pilot."),
    ("flying-sports", "Flying Sports", "Track hang gliding, paragliding or skydiving sessions and conditions."),
    ("drone-flying", "Drone Flying", "Log drone flights, locations, battery use and practice goals."),
]

LOCAL_AMBIGUOUS_TERMS: Dict[str, List[Entry]] = {
    "flying": _FLYING,
    "flight": [
        ("air-travel", "Air Travel", "Track flights taken as a passenger: trips, duration, jet lag and comfort."),
        ("fear-of-flying", "Fear of Flying", "Track anxiety before and during flights and what helps you cope."),
        ("flight-hours", "Flight Hours", "Log time in the air as a pilot or crew member."),
        ("flight-response", "Fight-or-Flight Response", "Track stress episodes where you feel the urge to escape or avoid."),
        ("stair-flights", "Stair Flights", "Count flights of stairs climbed as daily activity."),
    ],
    "hockey": [
        ("ice-hockey", "Ice Hockey", "Track ice hockey games and practices: ice time, intensity and injuries."),
        ("field-hockey", "Field Hockey", "Track field hockey matches and training sessions on grass or turf."),
        ("roller-hockey", "Roller Hockey", "Log roller or inline hockey sessions and how your body feels after."),
        ("street-hockey", "Street Hockey", "Track casual street or ball hockey games with friends."),
    ],
    "curling": [
        ("curling-sport", "Curling (Sport)", "Track curling games, sweeping effort and team practice on ice."),
        ("hair-curling", "Hair Curling", "Track hair curling routines, heat use and effects on hair health."),
        ("bicep-curls", "Bicep Curls", "Log curl exercises: sets, reps and weight lifted."),
        ("leg-curls", "Leg Curls", "Log hamstring curl exercises and progression over time."),
    ],
    "reading": [
        ("reading-books", "Reading Books", "Track books and pages read, reading time and focus."),
        ("blood-pressure-reading", "Blood Pressure Reading", "Log systolic and diastolic blood pressure measurements."),
        ("glucose-reading", "Glucose Reading", "Log blood sugar measurements around meals and activity."),
        ("meter-reading", "Meter Reading", "Record readings from a home device such as a scale or oximeter."),
        ("reading-glasses", "Eye Strain While Reading", "Track eye strain and headaches linked to reading or screens."),
    ],
    "drinking": [
        ("alcohol-intake", "Alcohol Intake", "Track alcoholic drinks, amounts and how you feel afterwards."),
        ("water-intake", "Water Intake", "Track daily hydration and glasses of water."),
        ("caffeine-intake", "Caffeine Intake", "Track coffee, tea and energy drinks and their effect on sleep."),
        ("sugary-drinks", "Sugary Drinks", "Track soda and juice consumption to cut back on sugar."),
    ],
    "smoking": [
        ("tobacco-smoking", "Tobacco Smoking", "Track cigarettes smoked, cravings and quitting progress."),
        ("vaping", "Vaping", "Track vaping sessions, nicotine strength and cravings."),
        ("cannabis-use", "Cannabis Use", "Track cannabis use, amount and effects on mood and sleep."),
        ("food-smoking", "Smoking Food", "Log smoking sessions for meat or fish: wood, temperature and time."),
    ],
    "shooting": [
        ("target-shooting", "Target Shooting", "Log range sessions, accuracy and equipment used."),
        ("photo-shooting", "Photo Shoots", "Track photography sessions, locations and creative goals."),
        ("shooting-pain", "Shooting Pain", "Track sudden sharp nerve pain: location, intensity and triggers."),
        ("basketball-shooting", "Shooting Practice", "Track shooting drills in basketball or other sports and your percentage."),
    ],
    "chilling": [
        ("relaxation", "Relaxation Time", "Track downtime and how rested you feel afterwards."),
        ("cold-exposure", "Cold Exposure", "Log cold plunges, ice baths and cold showers."),
        ("chills-symptom", "Chills", "Track episodes of chills or shivering and any fever."),
        ("social-hangouts", "Hanging Out", "Track time spent hanging out with friends."),
    ],
    "running": [
        ("running-exercise", "Running (Exercise)", "Track runs: distance, pace and how your body feels."),
        ("runny-nose", "Runny Nose", "Track a runny nose, allergy or cold symptoms and triggers."),
        ("trail-running", "Trail Running", "Log trail runs, elevation and terrain."),
        ("race-training", "Race Training", "Track a training plan toward a race such as a 5k or marathon."),
    ],
    "driving": [
        ("commute-driving", "Commute Driving", "Track time spent driving and stress levels on the road."),
        ("driving-anxiety", "Driving Anxiety", "Track anxiety or panic while driving and what triggers it."),
        ("driving-lessons", "Driving Lessons", "Log practice hours and skills while learning to drive."),
        ("golf-driving", "Golf Driving", "Track driving range sessions and drive distance."),
    ],
    "lifting": [
        ("weight-lifting", "Weight Lifting", "Track lifts, sets, reps and weight across workouts."),
        ("heavy-lifting-work", "Heavy Lifting at Work", "Track physically demanding lifting at work and back strain."),
        ("mood-lifting", "Mood Lifting", "Track activities that lift your mood and how much they help."),
        ("olympic-lifting", "Olympic Lifting", "Log snatch and clean and jerk sessions and technique notes."),
    ],
    "bowling": [
        ("ten-pin-bowling", "Ten-Pin Bowling", "Track games, scores and strikes at the bowling alley."),
        ("cricket-bowling", "Cricket Bowling", "Log overs bowled, pace and arm or shoulder soreness."),
        ("lawn-bowls", "Lawn Bowls", "Track lawn bowls games and practice sessions."),
        ("candlepin-bowling", "Candlepin Bowling", "Track candlepin or duckpin bowling games and scores."),
    ],
    "batting": [
        ("baseball-batting", "Baseball Batting", "Track at-bats, hits and swing practice."),
        ("cricket-batting", "Cricket Batting", "Log innings, runs scored and net sessions."),
        ("batting-cage", "Batting Cage Practice", "Track batting cage sessions, pitch speed and contact rate."),
        ("softball-batting", "Softball Batting", "Track softball plate appearances and hitting practice."),
    ],
    "pressing": [
        ("bench-press", "Bench Press", "Track bench press sets, reps and weight."),
        ("overhead-press", "Overhead Press", "Track overhead or shoulder press progress."),
        ("leg-press", "Leg Press", "Track leg press sessions and weight."),
        ("chest-pressure", "Chest Pressure", "Track a pressing feeling in the chest: when it happens and how long it lasts."),
        ("pressing-deadlines", "Pressing Deadlines", "Track work pressure and stress from urgent deadlines."),
    ],
    "cycling": [
        ("road-cycling", "Road Cycling", "Track rides: distance, speed and elevation."),
        ("indoor-cycling", "Indoor Cycling", "Log spin classes or stationary bike workouts."),
        ("menstrual-cycle", "Menstrual Cycle", "Track cycle days, flow and related symptoms."),
        ("bike-commuting", "Bike Commuting", "Track rides to work or school and how you feel on arrival."),
        ("mountain-biking", "Mountain Biking", "Log trail rides, terrain and falls."),
    ],
    "boxing": [
        ("boxing-training", "Boxing Training", "Track bag work, pad work and conditioning sessions."),
        ("boxing-sparring", "Sparring", "Log sparring rounds, partners and any hits taken."),
        ("fitness-boxing", "Fitness Boxing", "Track cardio boxing classes and intensity."),
        ("moving-boxes", "Packing and Moving", "Track packing and moving days and the strain on your body."),
    ],
    "climbing": [
        ("rock-climbing", "Rock Climbing", "Log outdoor climbs, routes and grades."),
        ("bouldering", "Bouldering", "Track bouldering sessions, problems sent and finger strain."),
        ("stair-climbing", "Stair Climbing", "Count stairs or floors climbed for daily activity."),
        ("mountaineering", "Mountaineering", "Track hikes at altitude, elevation gained and altitude symptoms."),
    ],
    "dancing": [
        ("dance-classes", "Dance Classes", "Track dance lessons, styles practiced and progress."),
        ("social-dancing", "Social Dancing", "Log nights out dancing and how much you moved."),
        ("dance-fitness", "Dance Fitness", "Track dance workout classes and intensity."),
        ("performance-dance", "Performance Rehearsal", "Track rehearsals and performances, including injuries and fatigue."),
    ],
    "walking": [
        ("daily-steps", "Daily Steps", "Track step count and walking time each day."),
        ("hiking", "Hiking", "Log hikes, trails, distance and elevation."),
        ("dog-walking", "Dog Walking", "Track walks with your dog and their length."),
        ("walking-difficulty", "Walking Difficulty", "Track pain or difficulty while walking and what affects it."),
    ],
    "fasting": [
        ("intermittent-fasting", "Intermittent Fasting", "Track fasting windows, hunger and energy."),
        ("religious-fasting", "Religious Fasting", "Track fasting for religious observance and how you feel."),
        ("medical-fasting", "Medical Fasting", "Track fasting before blood tests or procedures."),
        ("extended-fasting", "Extended Fasting", "Track multi-day fasts, electrolytes and symptoms."),
    ],
    "gaming": [
        ("video-gaming", "Video Gaming", "Track time spent playing video games and its effect on sleep and mood."),
        ("board-games", "Board Games", "Log board game sessions and who you played with."),
        ("gambling", "Gambling", "Track betting, money spent and urges to gamble."),
        ("esports-practice", "Esports Practice", "Track competitive gaming practice, rank and wrist strain."),
    ],
    "training": [
        ("strength-training", "Strength Training", "Track resistance workouts, sets and load."),
        ("endurance-training", "Endurance Training", "Track cardio training volume and recovery."),
        ("dog-training", "Dog Training", "Log training sessions and commands practiced with your dog."),
        ("professional-training", "Professional Training", "Track courses, certifications and study time."),
        ("sleep-training", "Sleep Training", "Track a sleep training routine for a baby or yourself."),
    ],
}


__all__ = ["Entry", "LOCAL_AMBIGUOUS_TERMS"]
