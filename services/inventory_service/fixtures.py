# Sample lessons. Served as-is in fallback mode and used to seed an empty
# connected store (which assigns its own ids).
SAMPLE_LESSONS = [
    {
        "id": "1",
        "subject": "Math",
        "location": "North London",
        "price": 21,
        "spaces": 5,
        "description": "Improve your algebra, fractions, equations and problem-solving skills.",
        "image": "math.jpg",
    },
    {
        "id": "2",
        "subject": "Science",
        "location": "West London",
        "price": 25,
        "spaces": 6,
        "description": "Learn physics, chemistry and biology with hands-on experiments.",
        "image": "science.jpg",
    },
    {
        "id": "3",
        "subject": "English",
        "location": "South London",
        "price": 18,
        "spaces": 7,
        "description": "Grammar, comprehension, essay writing and reading confidence.",
        "image": "english.jpg",
    },
    {
        "id": "4",
        "subject": "Art",
        "location": "East London",
        "price": 15,
        "spaces": 4,
        "description": "Creative drawing, painting and craft skills.",
        "image": "art.jpg",
    },
    {
        "id": "5",
        "subject": "Music",
        "location": "Central London",
        "price": 22,
        "spaces": 5,
        "description": "Rhythm, melody and performance across different instruments.",
        "image": "music.jpg",
    },
    {
        "id": "6",
        "subject": "History",
        "location": "North London",
        "price": 19,
        "spaces": 9,
        "description": "Important events, people and timelines from the past.",
        "image": "history.jpg",
    },
    {
        "id": "7",
        "subject": "Geography",
        "location": "East London",
        "price": 17,
        "spaces": 6,
        "description": "Maps, climates, natural disasters and the environment.",
        "image": "geography.jpg",
    },
    {
        "id": "8",
        "subject": "Coding",
        "location": "Central London",
        "price": 30,
        "spaces": 10,
        "description": "Programming basics, logic and building simple apps.",
        "image": "coding.jpg",
    },
    {
        "id": "9",
        "subject": "Drama",
        "location": "West London",
        "price": 16,
        "spaces": 5,
        "description": "Acting, improvisation and performance confidence.",
        "image": "drama.jpg",
    },
    {
        "id": "10",
        "subject": "Sports",
        "location": "South London",
        "price": 12,
        "spaces": 7,
        "description": "Teamwork, fitness and a mix of popular sports.",
        "image": "sports.jpg",
    },
]
