"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- auth: 회원 가입 / 로그인 / 푸시 구독
- members: 회원 관리 (관리자)
- products: 상품
- orders: 체크아웃 / 주문
- loans: 대출 / 상환
- savings: 저축 입출금
- payments: 온라인 입금 (Midtrans)
- reports: 프로필 / 거래 내역 / 통계 / 현금 분개장
"""
