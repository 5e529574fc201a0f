"""
Demo payloads in the backend's wire format.

Kept as raw dictionaries (not records) so the demo service exercises the
same decoders as the HTTP service, including the mixed key conventions.
"""

DEMO_FUNDIS = [
    {
        "id": "f-100",
        "email": "juma.plumber@example.com",
        "phone": "+255712000100",
        "rating": 4.8,
        "total_jobs": 42,
        "completed_jobs": 40,
        "is_available": 1,
        "hourly_rate": "15000",
        "fundi_profile": {
            "full_name": "Juma Mrisho",
            "skills": '["Plumbing","Pipe Repair","Installation"]',
            "location": "Dar es Salaam",
            "verification_status": "approved",
            "bio": "Licensed plumber, 10 years in residential work.",
        },
        "created_at": "2024-02-11T08:30:00Z",
    },
    {
        "id": "f-101",
        "full_name": "Neema Kweka",
        "email": "neema@example.com",
        "phone": "+255754000101",
        "location": "Arusha",
        "rating": "4.5",
        "totalJobs": 18,
        "completedJobs": 17,
        "skills": ["Electrical", "Wiring", "Solar Installation"],
        "isVerified": True,
        "isAvailable": False,
        "hourlyRate": 20000,
        "createdAt": "2024-05-03T10:00:00Z",
    },
    {
        "id": "f-102",
        "name": "Baraka Said",
        "email": "baraka@example.com",
        "phone": "+255765000102",
        "rating": 3.9,
        "total_jobs": 7,
        "completed_jobs": 5,
        "status": "active",
        "hourly_rate": 8000,
        "fundi_profile": {
            "skills": "Carpentry, Furniture, Roofing",
            "location_lat": -6.7924,
            "location_lng": 39.2083,
        },
        "visible_portfolio": [
            {"id": "p-1", "title": "Teak wardrobe", "is_visible": 1},
            {"id": "p-2", "title": "Roof truss", "is_visible": 0},
        ],
    },
    {
        "id": "f-103",
        "name": "Amina Hassan",
        "email": "amina@example.com",
        "phone": "+255787000103",
        "location": "Mwanza",
        "rating": 4.2,
        "total_jobs": 25,
        "completed_jobs": 22,
        "skills": ["Painting", "Tiling"],
        "is_verified": "yes",
        "is_available": "true",
        "hourly_rate": 10000,
    },
]

DEMO_JOBS = [
    {
        "id": "j-200",
        "title": "Fix leaking kitchen sink",
        "description": "Water pooling under the sink since Monday.",
        "category": {"id": 1, "name": "Plumbing"},
        "location": "Dar es Salaam",
        "budget": "45000",
        "currency": "TSh",
        "status": "pending",
        "customer": {"id": "c-1", "full_name": "Rehema John"},
        "required_skills": ["Plumbing"],
        "deadline": "2030-01-15T12:00:00Z",
        "budget_breakdown": {"labour": 30000, "materials": 15000},
        "estimated_duration": 3,
        "priority": "high",
    },
    {
        "id": "j-201",
        "title": "Rewire two-bedroom house",
        "description": "Old wiring, frequent trips.",
        "category": "Electrical",
        "location": "Arusha",
        "budget": 850000,
        "status": "pending",
        "customerId": "c-2",
        "customerName": "Peter Mushi",
        "requiredSkills": ["Electrical", "Wiring"],
        "deadline": "2030-03-01T09:00:00Z",
        "budgetBreakdown": {"labour": 500000, "materials": 350000},
        "estimatedDuration": 40,
        "priority": "urgent",
    },
    {
        "id": "j-202",
        "title": "Paint shop front",
        "category": "Painting",
        "location": "Mwanza",
        "budget": 120000,
        "status": "in_progress",
        "customer_id": "c-3",
        "customer_name": "Grace Mollel",
        "required_skills": ["Painting"],
        "is_urgent": False,
        "priority": "low",
    },
]

DEMO_PAYMENTS = [
    {
        "id": "pay-300",
        "user_id": "c-1",
        "amount": 5000,
        "payment_type": "job_posting",
        "status": "completed",
        "pesapal_reference": "PSP-0001",
        "created_at": "2024-06-01T10:15:00Z",
    },
    {
        "id": "pay-301",
        "userId": "c-2",
        "amount": "1500000",
        "paymentType": "subscription",
        "status": "pending",
    },
    {
        "id": "pay-302",
        "user_id": "c-3",
        "amount": 2500,
        "payment_type": "application_fee",
        "status": "failed",
        "metadata": {"reason": "insufficient funds"},
    },
]

DEMO_CATEGORIES = ["Plumbing", "Electrical", "Carpentry", "Painting", "Masonry"]

DEMO_SKILLS = [
    "Plumbing",
    "Pipe Repair",
    "Electrical",
    "Wiring",
    "Solar Installation",
    "Carpentry",
    "Roofing",
    "Painting",
    "Tiling",
]

DEMO_LOCATIONS = ["Dar es Salaam", "Arusha", "Mwanza", "Dodoma", "Zanzibar"]
