from privacyweave.schemas.job_listing import JobListingCreate

DEFAULT_JOB_LISTINGS = [
    JobListingCreate(
        title="AI/ML Engineer (0-1 Year Experience)",
        description=(
            "Join our innovative team to develop and implement AI/ML solutions for data privacy and "
            "compliance automation. You'll work on cutting-edge privacy-preserving AI models and "
            "contribute to our machine learning pipeline for data classification and policy automation."
        ),
        requirements=(
            "Bachelor's degree in Computer Science, AI, or related field. Basic knowledge of Python and "
            "machine learning libraries (TensorFlow, PyTorch, or scikit-learn). Understanding of "
            "fundamental ML concepts and algorithms. Eagerness to learn privacy-enhancing technologies. "
            "Strong analytical and problem-solving skills."
        ),
        employment_type="Full-time",
        location="Coimbatore",
        experience="Entry Level (0-1 Year)",
        listing_category="Technology",
    ),
    JobListingCreate(
        title="Full Stack Developer (0-1 Year Experience)",
        description=(
            "Develop responsive web applications and APIs for our privacy automation platform. You'll "
            "help build intuitive interfaces for privacy management tools and contribute to scalable "
            "backend services that power our data governance solutions."
        ),
        requirements=(
            "Bachelor's degree in Computer Science or related technical field. Knowledge of "
            "JavaScript/TypeScript, HTML, and CSS. Familiarity with React or similar frontend frameworks. "
            "Basic understanding of RESTful API and database concepts."
        ),
        employment_type="Full-time",
        location="Coimbatore",
        experience="Entry Level (0-1 Year)",
        listing_category="Development",
    ),
    JobListingCreate(
        title="Cybersecurity & Encryption Specialist (0-1 Year Experience)",
        description=(
            "Help implement end-to-end encryption and security protocols for our privacy-focused "
            "applications. You'll work on data protection mechanisms, assist in security assessment of "
            "our systems, and help implement encryption standards that keep client data secure."
        ),
        requirements=(
            "Bachelor's degree in Computer Science, Cybersecurity, or related field. Knowledge of "
            "fundamental encryption algorithms and network security principles. Interest in privacy "
            "regulations (GDPR, CCPA, etc.). Strong attention to detail."
        ),
        employment_type="Full-time",
        location="Coimbatore",
        experience="Entry Level (0-1 Year)",
        listing_category="Cybersecurity",
    ),
]
