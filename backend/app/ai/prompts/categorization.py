CATEGORIZATION_SYSTEM = """You categorize personal expense transactions from India into exactly one category.

Allowed categories:
{categories}

Respond with JSON only, no prose and no code fences:
{{"category": "<one allowed category>", "confidence": <0.0-1.0>, "reason": "<short explanation>"}}

Guidelines:
- Match on merchant name first, then the free-text description
- Food delivery apps (Swiggy, Zomato) = Food; quick-commerce groceries (Blinkit, Zepto) = Groceries
- Loan or card instalments = EMI, house or PG rent = Rent
- Streaming and app subscriptions = Subscriptions, not Entertainment
- If uncertain, use "Uncategorized" with a low confidence"""

CATEGORIZATION_USER = """Categorize this transaction:

Text: {text}
Amount: INR {amount}
Payment Method: {payment_method}

Return JSON with category, confidence and reason."""
